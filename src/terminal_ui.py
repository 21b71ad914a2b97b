"""Terminal screens for the planning flow, rendered with Rich."""

import logging
from typing import Awaitable, Optional

from rich.console import Console
from rich.markdown import Markdown
from rich.panel import Panel
from rich.prompt import Confirm, Prompt
from rich.table import Table
from rich.text import Text

from lesson_planner import LessonPlanner
from models.lesson import Step
from services.export_service import ExportService, render_plan_html
from utils.errors import TransitionError

logger = logging.getLogger(__name__)

APP_TITLE = "EduTube Planner"
QUIT_CONFIRMATION = "프로그램을 종료하시겠습니까? (아니오를 선택하면 'q'를 주제로 검색합니다)"
LOADING_MESSAGE = "AI가 내용을 작성 중입니다... 잠시만 기다려주세요."
SELECTION_HELP = "번호: 선택 · n: 다음 · b: 뒤로 · r: 처음으로 · x: 알림 닫기 · q: 종료"
PLAN_HELP = "e: Google Docs로 내보내기 · b: 뒤로 · r: 처음으로 · x: 알림 닫기 · q: 종료"


def render_step_indicator(current: Step) -> Text:
    """Progress line: finished steps checked, current highlighted, rest dim."""
    text = Text(justify="center")
    for step in Step:
        if step < current:
            text.append(f"✓ {step.label}", style="bold blue")
        elif step == current:
            text.append(f" {step.value + 1} {step.label} ", style="bold white on blue")
        else:
            text.append(f"{step.value + 1} {step.label}", style="dim")
        if step != Step.VIEW_PLAN:
            text.append("  ──  ", style="blue" if step < current else "dim")
    return text


class TerminalUI:
    """Interactive four-screen front end for a LessonPlanner."""

    def __init__(
        self,
        planner: LessonPlanner,
        export_service: ExportService,
        console: Optional[Console] = None,
    ):
        self.planner = planner
        self.export_service = export_service
        self.console = console or Console()
        self.notice: Optional[str] = None

    async def run(self) -> None:
        """Show screens until the user quits."""
        while True:
            self._render_header()
            step = self.planner.step
            if step == Step.INPUT_TOPIC:
                keep_going = await self._topic_screen()
            elif step == Step.SELECT_VIDEO:
                keep_going = await self._video_screen()
            elif step == Step.SELECT_ASSESSMENT:
                keep_going = await self._assessment_screen()
            else:
                keep_going = self._plan_screen()
            if not keep_going:
                return

    def _render_header(self) -> None:
        self.console.clear()
        self.console.rule(f"[bold]{APP_TITLE}")
        self.console.print(render_step_indicator(self.planner.step))
        self.console.print()

        error = self.planner.state.error
        if error:
            self.console.print(
                Panel(Text(error, style="red"), title="오류", border_style="red")
            )
        if self.notice:
            self.console.print(Panel(Text(self.notice), border_style="green"))
            self.notice = None

    async def _with_loading(self, transition: Awaitable[None]) -> None:
        # No input is read while a request is outstanding.
        with self.console.status(LOADING_MESSAGE, spinner="dots"):
            await transition

    async def _topic_screen(self) -> bool:
        self.console.print("[bold]어떤 수업을 준비하시나요?[/bold]")
        self.console.print(
            "수업 주제를 입력하면 AI가 최적의 유튜브 영상과 수행평가 계획을 제안합니다."
        )
        topic = ""
        while not topic.strip():
            topic = Prompt.ask(
                "수업 주제 (예: 조선 후기의 사회 변동, 뉴턴의 운동 법칙 · 종료: q)",
                console=self.console,
            )
        if topic.strip().lower() == "q" and Confirm.ask(QUIT_CONFIRMATION, console=self.console):
            return False

        await self._with_loading(self.planner.submit_topic(topic))
        return True

    async def _video_screen(self) -> bool:
        state = self.planner.state
        self.console.print("[bold]영상 선택하기[/bold]")
        self.console.print("수업에 활용하고 싶은 영상을 선택해주세요.")

        table = Table(show_lines=True, expand=True)
        table.add_column("", width=2)
        table.add_column("#", justify="right", width=3)
        table.add_column("제목", ratio=3)
        table.add_column("채널", ratio=1)
        table.add_column("설명", ratio=3)
        for video in state.video_candidates:
            selected = state.selected_video is not None and state.selected_video.id == video.id
            table.add_row(
                "▶" if selected else "",
                str(video.id),
                Text.assemble((video.title, "bold"), "\n", (video.url, "cyan")),
                video.channel,
                video.description,
                style="on grey15" if selected else None,
            )
        self.console.print(table)

        choice = Prompt.ask(SELECTION_HELP, console=self.console).strip().lower()
        if choice.isdigit():
            video = state.find_candidate(int(choice))
            if video is None:
                self.notice = f"{choice}번 영상이 없습니다."
            else:
                self.planner.select_video(video)
            return True
        if choice == "n":
            if state.selected_video is None:
                self.notice = "영상을 먼저 선택해주세요."
                return True
            await self._with_loading(self.planner.confirm_video())
            return True
        return self._common_command(choice)

    async def _assessment_screen(self) -> bool:
        state = self.planner.state
        analysis = state.analysis
        self.console.print(
            Panel(analysis.summary if analysis else "", title="선택한 영상 요약", border_style="magenta")
        )
        self.console.print("[bold]수행평가 주제 선택[/bold]")
        self.console.print("원하는 수행평가를 선택하면 상세 지도안을 작성해드립니다.")

        table = Table(show_lines=True, expand=True)
        table.add_column("", width=2)
        table.add_column("#", justify="right", width=3)
        table.add_column("수행평가", ratio=1)
        table.add_column("설명", ratio=3)
        for option in analysis.assessments if analysis else []:
            selected = (
                state.selected_assessment is not None
                and state.selected_assessment.id == option.id
            )
            table.add_row(
                "▶" if selected else "",
                str(option.id),
                Text(option.title, style="bold"),
                option.description,
                style="on grey15" if selected else None,
            )
        self.console.print(table)

        choice = Prompt.ask(SELECTION_HELP, console=self.console).strip().lower()
        if choice.isdigit():
            option = analysis.find_assessment(int(choice)) if analysis else None
            if option is None:
                self.notice = f"{choice}번 수행평가가 없습니다."
            else:
                self.planner.select_assessment(option)
            return True
        if choice == "n":
            if state.selected_assessment is None:
                self.notice = "수행평가를 먼저 선택해주세요."
                return True
            await self._with_loading(self.planner.confirm_assessment())
            return True
        return self._common_command(choice)

    def _plan_screen(self) -> bool:
        plan = self.planner.state.plan
        self.console.print("[bold]수업 지도안 생성 완료[/bold]")
        self.console.print(
            "e를 누르면 지도안이 복사되고 Google Docs가 열립니다. 열린 문서에서 붙여넣기만 하시면 됩니다."
        )
        self.console.print(Panel(Markdown(plan), title="미리보기", border_style="blue"))

        choice = Prompt.ask(PLAN_HELP, console=self.console).strip().lower()
        if choice == "e":
            result = self.export_service.export(plan, render_plan_html(plan))
            self.notice = result.message
            return True
        return self._common_command(choice)

    def _common_command(self, choice: str) -> bool:
        """Back, reset, dismiss and quit, shared by every screen after the first."""
        if choice == "q":
            return False
        if choice == "b":
            try:
                self.planner.go_back()
            except TransitionError as e:
                logger.debug(f"Ignoring back command: {e}")
        elif choice == "r":
            self.planner.reset(lambda message: Confirm.ask(message, console=self.console))
        elif choice == "x":
            self.planner.dismiss_error()
        else:
            self.notice = f"알 수 없는 명령입니다: {choice}"
        return True
