"""Dashboard controller.

One :class:`DashboardController` owns the state of one signed-in user's
dashboard: the current catalog page, the editor and its pending submission,
the staged deletion and the preview playback.  Every network operation goes
through the same steps:

1. the session gate -- not ready or no longer valid means a silent no-op;
2. the token -- a valid session without a token is a visible error;
3. for uploads and edits, validation and payload construction;
4. the request, whose failure is classified as session-invalid (401/403)
   or as an error carrying the status and body;
5. on success, a re-fetch of the page that was current when the operation
   started.

No network operation raises: failures end up in ``state.error``.
"""

from __future__ import annotations

from typing import Any, Awaitable, Callable

from loguru import logger

from ..api import charts
from ..api.client import ChartsClient, SessionExpiredError
from ..models.chart import Chart, ChartStatus, next_status
from ..models.submission import EditTarget, PendingSubmission
from ..session import SessionGate
from ..submission.payload import ChartPayload, build_payload
from ..submission.validator import validate_submission
from .playback import PlaybackRegistry
from .state import DashboardState, PipelinePhase

MISSING_TOKEN_MESSAGE = "No session token available"
NO_TARGET_MESSAGE = "No chart selected for editing"

EDITABLE_FIELDS = frozenset(PendingSubmission.model_fields) - {"mode", "target"}


class SubmissionError(Exception):
    """A submission was rejected before anything was sent."""


class DashboardController:
    """Synchronizes the chart catalog and runs chart mutations.

    Example::

        controller = DashboardController(session, client)
        await controller.fetch_page(0)
        controller.open_upload()
        controller.update_field("title", "Night Drive")
        ...
        await controller.submit()
    """

    def __init__(
        self,
        session: SessionGate,
        client: ChartsClient,
        playback: PlaybackRegistry | None = None,
    ) -> None:
        self.session = session
        self.client = client
        self.playback = playback or PlaybackRegistry()
        self.state = DashboardState()

    # ------------------------------------------------------------------
    # Gate and transitions
    # ------------------------------------------------------------------

    def _gate_open(self) -> bool:
        if not self.session.is_ready():
            return False
        if not self.session.is_valid():
            logger.warning("Session expired, clearing data")
            self.session.invalidate()
            return False
        return True

    def _transition(self, phase: PipelinePhase, error: str | None = None) -> None:
        logger.debug(f"Pipeline {self.state.phase} -> {phase}")
        self.state.phase = phase
        if phase == "failed":
            self.state.error = error

    def _expire_session(self) -> None:
        logger.warning("Server rejected the session token")
        self.session.invalidate()

    # ------------------------------------------------------------------
    # Catalog
    # ------------------------------------------------------------------

    async def fetch_page(self, page: int = 0) -> None:
        """Load *page* and replace the displayed catalog page with it."""
        self.state.loading = True
        try:
            if not self._gate_open():
                return
            if not self.session.token():
                logger.debug("No session token available, skipping fetch")
                return
            self.state.error = None
            self.state.page = await charts.list_charts(self.client, page)
            logger.debug(
                f"Loaded page {page}: {len(self.state.page.items)} charts "
                f"of {self.state.page.total_count}"
            )
        except SessionExpiredError:
            self._expire_session()
        except Exception as exc:
            logger.error(f"Failed to load page {page}: {exc}")
            self.state.error = str(exc)
        finally:
            self.state.loading = False

    async def refresh(self) -> None:
        await self.fetch_page(self.state.page.current_page)

    # ------------------------------------------------------------------
    # Editor
    # ------------------------------------------------------------------

    def open_upload(self) -> None:
        """Open the editor on an empty create-mode submission."""
        self.state.submission = PendingSubmission(mode="create")
        self.state.editor_open = True
        self.state.error = None

    def open_edit(self, chart: Chart) -> None:
        """Open the editor prefilled from *chart*.

        The charter name comes from ``author_field``, never from the
        formatted display name.
        """
        self.state.submission = PendingSubmission(
            mode="update",
            title=chart.title,
            artists=chart.artists,
            author=chart.author_field,
            rating="" if chart.rating is None else str(chart.rating),
            description=chart.description,
            tags=", ".join(chart.tags),
            target=EditTarget(
                id=chart.id,
                title=chart.title,
                jacket_url=chart.cover_url,
                bgm_url=chart.bgm_url,
                chart_url=chart.chart_url,
                preview_url=chart.preview_url,
                background_url=chart.background_url,
            ),
        )
        self.state.editor_open = True
        self.state.error = None

    def close_editor(self) -> None:
        """Close the editor and discard whatever was entered."""
        self.state.editor_open = False
        self.state.submission = None
        self.state.error = None

    def update_field(self, name: str, value: Any) -> None:
        """Set one field of the pending submission.

        Any displayed error is cleared as soon as the user edits again.
        """
        if name not in EDITABLE_FIELDS:
            raise ValueError(f"Unknown submission field: {name}")
        if self.state.submission is None:
            logger.debug(f"Ignoring edit of {name}: editor is not open")
            return
        setattr(self.state.submission, name, value)
        self.state.error = None

    async def submit(self) -> bool:
        """Send the pending submission as an upload or an edit."""
        submission = self.state.submission
        if submission is not None and submission.mode == "update":
            return await self.update(submission)
        return await self.create(submission)

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    async def _run_mutation(
        self,
        action: str,
        send: Callable[[ChartPayload | None], Awaitable[Any]],
        prepare: Callable[[], ChartPayload] | None = None,
        on_success: Callable[[], None] | None = None,
    ) -> bool:
        """Gate, prepare, send, classify and reconcile one mutation.

        Returns ``True`` when the server accepted the mutation.
        """
        page = self.state.page.current_page
        self.state.loading = True
        try:
            if not self._gate_open():
                self._transition("idle")
                return False
            self.state.error = None
            if not self.session.token():
                logger.error(f"{action} aborted: {MISSING_TOKEN_MESSAGE}")
                self._transition("failed", MISSING_TOKEN_MESSAGE)
                return False

            payload = None
            if prepare is not None:
                self._transition("validating")
                payload = prepare()

            self._transition("submitting")
            result = await send(payload)
            logger.info(f"{action} successful: {result}")
            self._transition("success")
            if on_success is not None:
                on_success()
            await self.fetch_page(page)
            return True
        except SubmissionError as exc:
            logger.debug(f"{action} rejected: {exc}")
            self._transition("failed", str(exc))
        except SessionExpiredError:
            self._expire_session()
            self._transition("session_invalid")
        except Exception as exc:
            logger.exception(f"{action} error: {exc}")
            self._transition("failed", str(exc))
        finally:
            self.state.loading = False
        return False

    def _finish_editing(self) -> None:
        self.state.editor_open = False
        self.state.submission = None
        self.state.error = None

    async def create(self, submission: PendingSubmission | None = None) -> bool:
        """Upload a new chart from *submission* (default: the pending one)."""
        submission = submission or self.state.submission or PendingSubmission(mode="create")

        def prepare() -> ChartPayload:
            result = validate_submission(submission, "create")
            if not result.ok:
                raise SubmissionError(result.error)
            return build_payload(submission, result.tags, "create", rating=result.rating)

        async def send(payload: ChartPayload | None) -> Any:
            return await charts.upload_chart(self.client, payload)

        return await self._run_mutation("Upload", send, prepare, self._finish_editing)

    async def update(self, submission: PendingSubmission | None = None) -> bool:
        """Send the changes in *submission* (default: the pending one)."""
        submission = submission or self.state.submission

        def prepare() -> ChartPayload:
            if submission is None or submission.target is None:
                raise SubmissionError(NO_TARGET_MESSAGE)
            result = validate_submission(submission, "update")
            if not result.ok:
                raise SubmissionError(result.error)
            return build_payload(submission, result.tags, "update", rating=result.rating)

        async def send(payload: ChartPayload | None) -> Any:
            return await charts.edit_chart(self.client, submission.target.id, payload)

        return await self._run_mutation("Edit", send, prepare, self._finish_editing)

    def request_delete(self, chart: Chart) -> None:
        """Stage *chart* for deletion; nothing is sent until confirmed."""
        self.state.pending_deletion = chart

    def cancel_delete(self) -> None:
        self.state.pending_deletion = None

    async def confirm_delete(self) -> bool:
        """Delete the staged chart."""
        chart = self.state.pending_deletion
        if chart is None:
            return False
        self.state.pending_deletion = None

        async def send(payload: ChartPayload | None) -> Any:
            return await charts.delete_chart(self.client, chart.id)

        return await self._run_mutation("Deletion", send, on_success=lambda: self.stop(chart.id))

    async def change_visibility(self, chart_id: str, status: ChartStatus) -> bool:
        """Set the visibility of *chart_id* to *status*."""

        async def send(payload: ChartPayload | None) -> Any:
            return await charts.set_visibility(self.client, chart_id, status)

        return await self._run_mutation("Visibility change", send)

    async def cycle_visibility(self, chart: Chart) -> bool:
        """Move *chart* to the next status in PRIVATE -> PUBLIC -> UNLISTED."""
        return await self.change_visibility(chart.id, next_status(chart.status))

    # ------------------------------------------------------------------
    # Preview playback
    # ------------------------------------------------------------------

    def play(self, chart: Chart) -> None:
        """Start the preview of *chart*, stopping any other preview."""
        url = chart.preview_url or chart.bgm_url
        if not url:
            logger.debug(f"Chart {chart.id} has no audio to play")
            return
        self.playback.acquire(chart.id, url)
        self.state.now_playing = chart.id

    def stop(self, chart_id: str) -> None:
        self.playback.release(chart_id)
        if self.state.now_playing == chart_id:
            self.state.now_playing = None

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def aclose(self) -> None:
        self.playback.clear()
        self.state.now_playing = None
        await self.client.aclose()
