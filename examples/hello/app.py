"""Hello -- one page from a string.

Front-matter sets the title; ``:markdown`` holds the prose.

Run:
    python app.py
"""

from folio import Environment

source = """\
---
title: Composing Applications with Diesel
---
article.guide
  h1 Composing Applications with Diesel
  :markdown
    We'll look at **patterns** for wiring services together.
"""

env = Environment()
page = env.from_string(source, name="hello.folio")
output = env.render(page)


def main() -> None:
    print(output)


if __name__ == "__main__":
    main()
