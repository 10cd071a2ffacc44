from pathlib import Path

import jinja2

from quicknote.config import BASE_PATH

TEMPLATES_DIR = Path(__file__).resolve().parents[1] / "templates"

# milliseconds between auto-save checks in the editor
SAVE_INTERVAL_MS = 1000

env = jinja2.Environment(
    loader=jinja2.FileSystemLoader(str(TEMPLATES_DIR)),
    autoescape=True,
)


def render_note_page(note_name: str, content: str, has_password: bool) -> str:
    template = env.get_template("note.html")
    return template.render(
        note_name=note_name,
        content=content,
        has_password=has_password,
        base_path=BASE_PATH,
        save_interval_ms=SAVE_INTERVAL_MS,
    )
