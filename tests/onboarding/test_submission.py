"""
Tests for the submission orchestrator.
"""

import asyncio
from unittest.mock import AsyncMock

from onboarding.images import ImageStager
from onboarding.submission import (
    SETUP_FAILED_MESSAGE,
    SUCCESS_MESSAGE,
    UPLOAD_FAILED_MESSAGE,
    SubmissionError,
    SubmissionOrchestrator,
    SubmissionStatus,
)
from sheshape.http import ApiError


def _run(coro):
    """Run an async coroutine synchronously (no pytest-asyncio needed)."""
    return asyncio.run(coro)


class TestSubmit:

    def test_minimal_draft_without_image(self, mock_collaborator, minimal_draft):
        orchestrator = SubmissionOrchestrator(mock_collaborator)
        result = _run(orchestrator.submit(minimal_draft))

        assert result.success
        assert result.message == SUCCESS_MESSAGE
        assert orchestrator.state.status == SubmissionStatus.SUCCEEDED
        mock_collaborator.upload_profile_image.assert_not_called()
        mock_collaborator.setup_profile.assert_awaited_once()

        payload = mock_collaborator.setup_profile.call_args.args[0]
        assert payload["language"] == "en"
        assert payload["emailNotifications"] is True
        assert payload["pushNotifications"] is True
        assert payload["privacyLevel"] == "FRIENDS"
        assert "profileImageUrl" not in payload

    def test_uploads_image_before_setup(self, mock_collaborator, minimal_draft, png_file):
        calls = []
        mock_collaborator.upload_profile_image.side_effect = lambda image: calls.append("upload") or "https://cdn.test/x.png"
        mock_collaborator.setup_profile.side_effect = lambda payload: calls.append("setup")

        image = ImageStager().stage(png_file).image
        result = _run(SubmissionOrchestrator(mock_collaborator).submit(minimal_draft, image))

        assert result.success
        assert calls == ["upload", "setup"]
        mock_collaborator.upload_profile_image.assert_awaited_once_with(image)
        payload = mock_collaborator.setup_profile.call_args.args[0]
        assert payload["profileImageUrl"] == "https://cdn.test/x.png"

    def test_upload_failure_aborts_before_setup(self, mock_collaborator, minimal_draft, png_file):
        mock_collaborator.upload_profile_image.side_effect = ApiError("boom", status_code=500)
        image = ImageStager().stage(png_file).image
        orchestrator = SubmissionOrchestrator(mock_collaborator)

        result = _run(orchestrator.submit(minimal_draft, image))

        assert result.success is False
        assert result.error == SubmissionError.IMAGE_UPLOAD_FAILED
        assert result.message == UPLOAD_FAILED_MESSAGE
        mock_collaborator.setup_profile.assert_not_called()
        assert orchestrator.state.status == SubmissionStatus.FAILED
        assert orchestrator.in_flight is False

    def test_setup_failure_uses_server_message(self, mock_collaborator, minimal_draft):
        mock_collaborator.setup_profile.side_effect = ApiError(
            "Validation error", status_code=400, payload={"message": "Phone number already registered"}
        )
        orchestrator = SubmissionOrchestrator(mock_collaborator)

        result = _run(orchestrator.submit(minimal_draft))

        assert result.error == SubmissionError.SETUP_FAILED
        assert orchestrator.state.status == SubmissionStatus.FAILED
        assert orchestrator.state.message == "Phone number already registered"

    def test_setup_failure_fallback_message(self, mock_collaborator, minimal_draft):
        mock_collaborator.setup_profile.side_effect = RuntimeError("socket closed")
        result = _run(SubmissionOrchestrator(mock_collaborator).submit(minimal_draft))
        assert result.message == SETUP_FAILED_MESSAGE

    def test_can_resubmit_after_failure(self, mock_collaborator, minimal_draft):
        mock_collaborator.setup_profile.side_effect = [RuntimeError("down"), {"ok": True}]
        orchestrator = SubmissionOrchestrator(mock_collaborator)

        assert _run(orchestrator.submit(minimal_draft)).success is False
        assert _run(orchestrator.submit(minimal_draft)).success is True
        assert mock_collaborator.setup_profile.await_count == 2

    def test_invalid_draft_fails_without_setup(self, mock_collaborator, minimal_draft):
        orchestrator = SubmissionOrchestrator(mock_collaborator)
        result = _run(orchestrator.submit(minimal_draft.set("privacyLevel", "SECRET")))
        assert result.error == SubmissionError.INVALID_PAYLOAD
        mock_collaborator.setup_profile.assert_not_called()

    def test_listeners_see_transitions(self, mock_collaborator, minimal_draft):
        orchestrator = SubmissionOrchestrator(mock_collaborator)
        seen = []
        orchestrator.subscribe(lambda state: seen.append(state.status))

        _run(orchestrator.submit(minimal_draft))

        assert seen == [SubmissionStatus.IN_FLIGHT, SubmissionStatus.SUCCEEDED]


class TestSingleFlight:

    def test_second_submit_while_in_flight_is_ignored(self, mock_collaborator, minimal_draft):
        async def scenario():
            gate = asyncio.Event()

            async def slow_setup(payload):
                await gate.wait()
                return {"ok": True}

            mock_collaborator.setup_profile = AsyncMock(side_effect=slow_setup)
            orchestrator = SubmissionOrchestrator(mock_collaborator)

            first = asyncio.create_task(orchestrator.submit(minimal_draft))
            await asyncio.sleep(0)
            assert orchestrator.in_flight
            assert orchestrator.state.status == SubmissionStatus.IN_FLIGHT

            second = await orchestrator.submit(minimal_draft)
            gate.set()
            return await first, second

        first, second = _run(scenario())

        assert first.success is True
        assert second.ignored is True
        assert mock_collaborator.setup_profile.await_count == 1
