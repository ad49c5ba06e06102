"""Errors -- what a broken page reports.

A page with inconsistent indentation fails with a located diagnostic,
while the good page next to it still renders.

Run:
    python app.py
"""

from folio import DictLoader, Environment, FolioError

pages = {
    "good.folio": "---\ntitle: Good\n---\np Fine.\n",
    "bad.folio": (
        "---\n"
        "title: Bad\n"
        "---\n"
        "section\n"
        "    p First paragraph\n"
        "  p Second paragraph\n"
    ),
}

env = Environment(loader=DictLoader(pages))

rendered: dict[str, str] = {}
errors: dict[str, FolioError] = {}
for name in env.list_pages():
    try:
        rendered[name] = env.render_page(name)
    except FolioError as e:
        errors[name] = e


def main() -> None:
    for name, error in errors.items():
        print(f"{name}:")
        print(error.format_compact())


if __name__ == "__main__":
    main()
