"""Shared fixtures for core unit tests"""

import pytest


SAMPLE_MD = """\
# Sample Article

date: 2024-06-01

A paragraph with **bold** text and an image:

![diagram](arch/overview.png)

```mermaid
graph TD;
  A-->B;
  B-->C["x & y"];
```

```python
print("a < b")
```
"""


@pytest.fixture(name="sample_md")
def sample_md_fixture():
    return SAMPLE_MD


@pytest.fixture(name="sample_file")
def sample_file_fixture(tmp_path):
    f = tmp_path / "content" / "sample-article.md"
    f.parent.mkdir()
    f.write_text(SAMPLE_MD)
    return f
