"""Export of finished lesson plans to the clipboard and a new Google Docs document."""

import logging
import webbrowser
from dataclasses import dataclass
from typing import Callable, Optional

from bs4 import BeautifulSoup, Comment
from markdown_it import MarkdownIt

from services.clipboard import PLAIN_FLAVOR, ClipboardError, ClipboardService
from utils.errors import ExportFailedError

logger = logging.getLogger(__name__)

DEFAULT_DESTINATION_URL = "https://docs.new"

# Google Docs drops stylesheets and classes on paste, so styles go inline.
TABLE_STYLE = "border-collapse: collapse; width: 100%; border: 1px solid black;"
HEADER_CELL_STYLE = "border: 1px solid black; padding: 8px; background-color: #f3f4f6;"
DATA_CELL_STYLE = "border: 1px solid black; padding: 8px;"
CONTAINER_STYLE = "font-family: Arial, sans-serif; line-height: 1.5; color: #000;"

TEXT_BLOCK_TAGS = ["h1", "h2", "h3", "h4", "h5", "h6", "p", "li", "tr", "pre", "blockquote"]

RICH_COPY_MESSAGE = (
    "✨ 수업 지도안 내용이 복사되었습니다!\n\n"
    "잠시 후 열리는 구글 문서(Google Docs)에서\n"
    "[Ctrl + V] 또는 [붙여넣기]를 하면 표와 형식이 완벽하게 붙여넣어집니다."
)
PLAIN_COPY_MESSAGE = "텍스트가 복사되었습니다. 새 문서에 붙여넣기 해주세요."
HTML_ONLY_NOTE = "※ 서식 있는 문서에서만 붙여넣을 수 있습니다. 메모장 같은 일반 텍스트 편집기에는 붙여넣어지지 않습니다."


@dataclass
class RichDocument:
    """Clipboard payloads for one lesson plan."""

    html_payload: str
    plain_text_payload: str


@dataclass
class ExportResult:
    """Outcome of an export, with the notice to show the user."""

    copied_as: str  # 'rich' (HTML and plain), 'html' (HTML only), 'plain' or 'failed'
    message: str
    destination_opened: bool = False


def render_plan_html(plan_text: str) -> str:
    """Render the Markdown lesson plan to HTML, tables included."""
    md = MarkdownIt("commonmark").enable(["table", "strikethrough"])
    return md.render(plan_text or "")


def _extract_plain_text(soup: BeautifulSoup) -> str:
    """One line per text block; inline markup is flattened into its line."""
    lines = []
    for block in soup.find_all(TEXT_BLOCK_TAGS):
        if block.name == "pre":
            text = block.get_text().rstrip()
        elif block.name == "tr":
            text = " | ".join(
                " ".join(cell.get_text().split()) for cell in block.find_all(["th", "td"])
            )
        else:
            # Nested blocks (sub-lists, paragraphs in loose list items) get their own lines
            own = [
                s for s in block.find_all(string=True)
                if not isinstance(s, Comment) and s.find_parent(TEXT_BLOCK_TAGS) is block
            ]
            text = " ".join("".join(own).split())
        if text:
            lines.append(text)

    if not lines:
        return " ".join(soup.get_text(" ").split())
    return "\n".join(lines)


def _prepend_style(tag, style: str) -> None:
    existing = tag.get("style")
    tag["style"] = f"{style} {existing}" if existing else style


def to_rich_document(plan_text: str, rendered_html: Optional[str] = None) -> RichDocument:
    """Build the rich and plain clipboard payloads for a lesson plan.

    Args:
        plan_text: Markdown lesson plan
        rendered_html: Already rendered HTML of the plan, rendered here when omitted

    Returns:
        RichDocument with inline-styled HTML and the text extracted from it
    """
    if rendered_html is None:
        rendered_html = render_plan_html(plan_text)

    soup = BeautifulSoup(rendered_html, "html.parser")
    plain_text = _extract_plain_text(soup)

    for table in soup.find_all("table"):
        table["border"] = "1"
        _prepend_style(table, TABLE_STYLE)
    for cell in soup.find_all("th"):
        _prepend_style(cell, HEADER_CELL_STYLE)
    for cell in soup.find_all("td"):
        _prepend_style(cell, DATA_CELL_STYLE)

    html_payload = f'<div style="{CONTAINER_STYLE}">{soup}</div>'
    return RichDocument(html_payload=html_payload, plain_text_payload=plain_text)


class ExportService:
    """Service for copying a lesson plan and opening a blank destination document."""

    def __init__(
        self,
        clipboard: Optional[ClipboardService] = None,
        destination_url: str = DEFAULT_DESTINATION_URL,
        open_url: Optional[Callable[[str], object]] = None,
    ):
        """Initialize export service.

        Args:
            clipboard: Clipboard writer, the system clipboard when omitted
            destination_url: Document opened after the copy
            open_url: Browser opener, webbrowser.open_new_tab when omitted
        """
        self.clipboard = clipboard or ClipboardService()
        self.destination_url = destination_url
        self.open_url = open_url or webbrowser.open_new_tab

    def export(self, plan_text: str, rendered_html: Optional[str] = None) -> ExportResult:
        """Copy the plan as rich text, falling back to plain text, then open the destination."""
        document = to_rich_document(plan_text, rendered_html)

        try:
            flavors = self.clipboard.write_rich(
                document.html_payload, document.plain_text_payload
            )
            if PLAIN_FLAVOR in flavors:
                logger.info("Lesson plan copied to clipboard as rich text")
                result = ExportResult(copied_as="rich", message=RICH_COPY_MESSAGE)
            else:
                logger.warning(
                    "Clipboard holds only the HTML flavor; plain-text targets cannot paste it"
                )
                result = ExportResult(
                    copied_as="html", message=f"{RICH_COPY_MESSAGE}\n\n{HTML_ONLY_NOTE}"
                )
        except ClipboardError as e:
            logger.warning(f"Rich clipboard write failed, falling back to plain text: {e}")
            result = self._export_plain(document)

        result.destination_opened = self._open_destination()
        return result

    def _export_plain(self, document: RichDocument) -> ExportResult:
        try:
            self.clipboard.write_text(document.plain_text_payload)
            logger.info("Lesson plan copied to clipboard as plain text")
            return ExportResult(copied_as="plain", message=PLAIN_COPY_MESSAGE)
        except ClipboardError as e:
            error = ExportFailedError()
            logger.error(f"Plain text clipboard write failed: {e}")
            return ExportResult(copied_as="failed", message=error.message)

    def _open_destination(self) -> bool:
        try:
            opened = bool(self.open_url(self.destination_url))
        except webbrowser.Error as e:
            logger.error(f"Failed to open {self.destination_url}: {e}")
            return False
        if not opened:
            logger.warning(f"No browser available to open {self.destination_url}")
        return opened
