import markdown

from .models import Page

MARKDOWN_EXTENSIONS = ["fenced_code", "tables"]


def render_markdown(text: str) -> str:
    return markdown.markdown(text, extensions=MARKDOWN_EXTENSIONS, output_format="html")


def page_html(page: Page) -> str:
    """HTML body of a wiki page; WYSIWYG pages are already HTML."""
    if page.is_markdown:
        return render_markdown(page.content)
    return page.content
