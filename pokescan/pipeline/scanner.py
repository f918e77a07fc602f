"""
Scan pipeline orchestrator.

Drives one card photo through OCR, database validation, authenticity
scoring and price lookup, reporting each stage to a progress sink before
its work begins. Only a missing image or an unreadable card fails the
scan; validation and pricing problems degrade to absent result fields.
"""

import asyncio
import dataclasses
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable, Dict, Optional

from ..authenticity import score_authenticity
from ..core.constants import API_TIMEOUT_S, ERROR_MESSAGES
from ..core.types import (
    CardInfo,
    CardPrices,
    ImageData,
    ScanProgress,
    ScanResult,
    ScanStage,
    ValidatedCard,
)
from ..utils.error_handler import (
    ErrorContext,
    ScanError,
    ScanInProgressError,
    handle_error,
)
from ..utils.log import LoggerMixin, scan_context
from .protocols import CardValidator, OCRService, PricingService

ProgressCallback = Callable[[ScanProgress], Any]

STAGE_PROGRESS: Dict[ScanStage, float] = {
    ScanStage.IDLE: 0.0,
    ScanStage.EXTRACTING_TEXT: 0.25,
    ScanStage.VALIDATING_CARD: 0.50,
    ScanStage.CHECKING_AUTHENTICITY: 0.75,
    ScanStage.FETCHING_PRICES: 0.90,
    ScanStage.COMPLETE: 1.0,
}

# Stable strings: clients localize and test against them
STAGE_LABELS: Dict[ScanStage, str] = {
    ScanStage.EXTRACTING_TEXT: "Extracting text from image…",
    ScanStage.VALIDATING_CARD: "Validating card information…",
    ScanStage.CHECKING_AUTHENTICITY: "Checking authenticity…",
    ScanStage.FETCHING_PRICES: "Fetching market prices…",
    ScanStage.COMPLETE: "Scan complete",
}


class ScanPipeline(LoggerMixin):
    """Runs one scan at a time against injected collaborators."""

    def __init__(
        self,
        ocr: OCRService,
        validator: CardValidator,
        pricing: PricingService,
        on_progress: Optional[ProgressCallback] = None,
        timeout: float = API_TIMEOUT_S,
    ):
        self.ocr = ocr
        self.validator = validator
        self.pricing = pricing
        self.on_progress = on_progress
        self.timeout = timeout
        self._stage = ScanStage.IDLE
        self._progress = 0.0
        self._running = False

    @property
    def stage(self) -> ScanStage:
        return self._stage

    @property
    def progress(self) -> float:
        return self._progress

    @property
    def is_running(self) -> bool:
        return self._running

    async def _notify(self, callback: Optional[ProgressCallback], stage: ScanStage,
                      label: Optional[str] = None) -> None:
        self._stage = stage
        self._progress = STAGE_PROGRESS.get(stage, self._progress)
        event = ScanProgress(stage=stage, fraction=self._progress,
                             label=label or STAGE_LABELS.get(stage, ""))
        self.logger.debug("Scan progress", stage=stage.value, fraction=event.fraction)
        if callback is not None:
            outcome = callback(event)
            if asyncio.iscoroutine(outcome):
                await outcome

    async def _call(self, awaitable: Awaitable) -> Any:
        return await asyncio.wait_for(awaitable, timeout=self.timeout)

    def _degraded(self, error: BaseException, operation: str, **input_data: Any) -> None:
        handle_error(
            error,
            ErrorContext(
                operation=operation,
                module=__name__,
                function="run_scan",
                input_data=input_data,
                timestamp=datetime.now(timezone.utc).isoformat(),
            ),
            self.logger,
            reraise=False,
        )

    async def _extract(self, image: ImageData) -> CardInfo:
        card_info = await self._call(self.ocr.extract_text(image.base64))
        if card_info is None or not card_info.name:
            raise ScanError(ERROR_MESSAGES["OCR_FAILED"], stage=ScanStage.EXTRACTING_TEXT.value)
        return card_info

    async def _validate(self, card_info: CardInfo) -> Optional[ValidatedCard]:
        try:
            validated = await self._call(
                self.validator.validate(card_info.name, card_info.set_number or None)
            )
        except Exception as e:
            self._degraded(e, "validate_card", name=card_info.name)
            return None
        if validated is None:
            self.logger.warning(ERROR_MESSAGES["CARD_NOT_FOUND"], name=card_info.name)
        return validated

    async def _price(self, card_info: CardInfo,
                     validated: Optional[ValidatedCard]) -> Optional[CardPrices]:
        enriched = dataclasses.replace(
            card_info,
            name=validated.name if validated else card_info.name,
            set_name=validated.set_name if validated else card_info.set_name,
        )
        try:
            return await self._call(self.pricing.get_prices(enriched))
        except Exception as e:
            self._degraded(e, "fetch_prices", name=enriched.name)
            return None

    async def run_scan(self, image: ImageData,
                       on_progress: Optional[ProgressCallback] = None) -> ScanResult:
        """
        Scan one card image.

        Args:
            image: Captured image; ``base64`` must be present
            on_progress: Progress sink for this scan, overriding the pipeline's

        Returns:
            The assembled ScanResult

        Raises:
            ScanInProgressError: If this pipeline is already scanning
            ScanError: If the image is missing, the card is unreadable, or an
                unexpected failure occurs
        """
        if self._running:
            raise ScanInProgressError(ERROR_MESSAGES["SCAN_IN_PROGRESS"])

        try:
            self._running = True
            with scan_context():
                return await self._run(image, on_progress or self.on_progress)
        finally:
            self._stage = ScanStage.IDLE
            self._progress = 0.0
            self._running = False

    async def _notify_failed(self, callback: Optional[ProgressCallback], message: str) -> None:
        # The scan's own error must reach the caller even if the sink is broken
        try:
            await self._notify(callback, ScanStage.FAILED, label=message)
        except Exception as e:
            self.logger.warning("Progress callback failed", error=str(e),
                                error_type=type(e).__name__)

    async def _run(self, image: ImageData, callback: Optional[ProgressCallback]) -> ScanResult:
        context = self.log_start("run_scan", uri=image.uri)
        try:
            if not image.base64:
                raise ScanError(ERROR_MESSAGES["IMAGE_CAPTURE"], stage=ScanStage.IDLE.value)

            await self._notify(callback, ScanStage.EXTRACTING_TEXT)
            card_info = await self._extract(image)

            await self._notify(callback, ScanStage.VALIDATING_CARD)
            validated = await self._validate(card_info)

            await self._notify(callback, ScanStage.CHECKING_AUTHENTICITY)
            authenticity = score_authenticity(card_info, found_in_database=validated is not None)

            await self._notify(callback, ScanStage.FETCHING_PRICES)
            prices = None
            if authenticity.is_authentic:
                prices = await self._price(card_info, validated)
            else:
                self.logger.info("Skipping price lookup", issues=authenticity.issues)

            result = ScanResult(
                card_info=card_info,
                validated_card=validated,
                authenticity=authenticity,
                prices=prices,
                scan_time=datetime.now(timezone.utc),
            )
            await self._notify(callback, ScanStage.COMPLETE)
            self.log_success(
                context,
                name=card_info.name,
                validated=validated is not None,
                is_authentic=authenticity.is_authentic,
                priced=prices is not None,
            )
            return result

        except ScanError as e:
            failed_stage = self._stage
            self.log_error(context, e, stage=failed_stage.value)
            await self._notify_failed(callback, e.message)
            raise
        except Exception as e:
            failed_stage = self._stage
            message = getattr(e, "message", None) or str(e) or ERROR_MESSAGES["API_ERROR"]
            self.log_error(context, e, stage=failed_stage.value)
            await self._notify_failed(callback, message)
            raise ScanError(message, stage=failed_stage.value) from e

    async def close(self) -> None:
        """Release collaborator HTTP sessions."""
        for collaborator in (self.ocr, self.validator, self.pricing):
            close = getattr(collaborator, "close", None)
            if close is not None:
                await close()
