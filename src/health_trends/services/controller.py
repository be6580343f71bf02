"""Reactive recompute controller.

Observes the input feeds of one metric and rebuilds the whole Snapshot on
every change. Recomputation is synchronous and pure given its inputs, so the
controller is the only writer and published snapshots are immutable.

States:

    IDLE ──trigger──> RECOMPUTING ──ok──> PUBLISHED
                          │    ^              │
                          │    └───trigger────┘
                          └──unsupported unit or error──> previous state

Triggers that arrive while a pass is running do not queue up: they mark the
pass as superseded, its result is dropped, and one more pass runs against the
latest inputs. Only that final pass is published. Listeners of the snapshot
feed run inside the pass, so an input they change produces one more pass
after every listener has seen the current snapshot.
"""

from collections.abc import Callable, Iterable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import UTC, date, datetime
from enum import Enum

import structlog

from health_trends.core.events import Subscription, ValueFeed
from health_trends.core.exceptions import UnsupportedUnitError
from health_trends.models.metric import DisplayUnit, MetricKind
from health_trends.models.sample import DatedSample
from health_trends.schemas.snapshot import Snapshot
from health_trends.services.aggregator import CHART_DAYS, MONTHLY_MONTHS, PeriodAggregator
from health_trends.services.display import DisplayMapper
from health_trends.services.scale import ScaleCalculator
from health_trends.services.store import TimeSeriesStore

logger = structlog.get_logger()


class ControllerState(str, Enum):
    """Lifecycle of the recompute controller."""

    IDLE = "idle"  # Nothing published yet
    RECOMPUTING = "recomputing"
    PUBLISHED = "published"


@dataclass
class MetricFeeds:
    """Input feeds for one metric stream.

    Attributes:
        samples: Full daily series in base unit (replaced wholesale)
        target: Target value in base unit, None or 0 when unset
        unit: Display unit preference
        today: Today's value in base unit, None or 0 when not yet available
    """

    samples: ValueFeed[tuple[DatedSample, ...]]
    target: ValueFeed[float | None]
    unit: ValueFeed[DisplayUnit]
    today: ValueFeed[float | None]

    @classmethod
    def create(
        cls,
        kind: MetricKind,
        unit: DisplayUnit,
        samples: Iterable[DatedSample] = (),
        target: float | None = None,
        today: float | None = None,
    ) -> "MetricFeeds":
        """Create feeds with initial values."""
        prefix = kind.value
        return cls(
            samples=ValueFeed(f"{prefix}.samples", tuple(samples)),
            target=ValueFeed(f"{prefix}.target", target),
            unit=ValueFeed(f"{prefix}.unit", unit),
            today=ValueFeed(f"{prefix}.today", today),
        )


@dataclass(frozen=True)
class RecomputeInputs:
    """Consistent read of every input for one pass."""

    generation: int
    as_of: date
    unit: DisplayUnit
    target: float | None
    today_value: float | None


class MetricController:
    """Recompute and publish Snapshots for one metric.

    Usage:
        feeds = MetricFeeds.create(MetricKind.WEIGHT, DisplayUnit.KILOGRAM)
        controller = MetricController(MetricKind.WEIGHT, feeds)
        controller.snapshots.subscribe(render)
        feeds.samples.publish(tuple(samples))   # -> one new Snapshot
        with controller.batch():
            feeds.target.publish(75.0)
            feeds.unit.publish(DisplayUnit.POUND)   # -> one Snapshot for both
    """

    def __init__(
        self,
        kind: MetricKind,
        feeds: MetricFeeds,
        aggregator: PeriodAggregator | None = None,
        scale_calculator: ScaleCalculator | None = None,
        clock: Callable[[], date] | None = None,
        chart_days: int = CHART_DAYS,
        monthly_months: int = MONTHLY_MONTHS,
    ) -> None:
        """Initialize controller and subscribe to its feeds.

        Args:
            kind: Metric kind this controller serves
            feeds: Input feeds
            aggregator: Period aggregator (default instance if None)
            scale_calculator: Scale calculator (default instance if None)
            clock: Returns the calendar day treated as today
            chart_days: Length of the raw chart series
            monthly_months: Months in the monthly series
        """
        self.kind = kind
        self.feeds = feeds
        self.aggregator = aggregator or PeriodAggregator()
        self.scale_calculator = scale_calculator or ScaleCalculator()
        self.clock = clock or date.today
        self.chart_days = chart_days
        self.monthly_months = monthly_months

        self.store = TimeSeriesStore()
        self.snapshots: ValueFeed[Snapshot | None] = ValueFeed(f"{kind.value}.snapshot", None)
        self.state = ControllerState.IDLE
        self.publish_count = 0

        self._generation = 0
        self._samples_dirty = True
        self._pending = False
        self._batch_depth = 0
        self.logger = logger.bind(service="controller", kind=kind.value)

        self._subscriptions: list[Subscription] = [
            feeds.samples.subscribe(self._on_samples),
            feeds.target.subscribe(lambda _: self._trigger("target")),
            feeds.unit.subscribe(lambda _: self._trigger("unit")),
            feeds.today.subscribe(lambda _: self._trigger("today")),
        ]

    def current_snapshot(self) -> Snapshot | None:
        """Last published snapshot, None before the first publish."""
        return self.snapshots.value

    def request_recompute(self) -> None:
        """Recompute against current inputs (e.g., after midnight)."""
        self._trigger("manual")

    @contextmanager
    def batch(self) -> Iterator["MetricController"]:
        """Defer triggers and run one recompute when the block exits."""
        self._batch_depth += 1
        try:
            yield self
        finally:
            self._batch_depth -= 1
        if self._batch_depth == 0 and self._pending:
            self._run("batch")

    def close(self) -> None:
        """Stop observing the input feeds."""
        for subscription in self._subscriptions:
            subscription.cancel()
        self._subscriptions.clear()

    def _on_samples(self, _: tuple[DatedSample, ...]) -> None:
        self._samples_dirty = True
        self._trigger("samples")

    def _trigger(self, reason: str) -> None:
        self._generation += 1
        if self._batch_depth or self.state == ControllerState.RECOMPUTING:
            self._pending = True
            self.logger.debug("Recompute coalesced", reason=reason, generation=self._generation)
            return
        self._run(reason)

    def _run(self, reason: str) -> None:
        try:
            self._run_passes(reason)
        except Exception:
            self._pending = False
            self._settle()
            self.logger.exception(
                "Recompute failed, keeping previous snapshot",
                reason=reason,
                generation=self._generation,
            )
            raise

    def _run_passes(self, reason: str) -> None:
        while True:
            self.state = ControllerState.RECOMPUTING
            self._pending = False
            inputs = self._read_inputs()

            try:
                snapshot = self._compute(inputs)
            except UnsupportedUnitError as e:
                if self._pending:
                    continue
                self._settle()
                self.logger.error(
                    "Recompute aborted, keeping previous snapshot",
                    reason=reason,
                    generation=inputs.generation,
                    **e.to_log_dict(),
                )
                return

            if self._pending:
                self.logger.debug("Recompute superseded", generation=inputs.generation)
                continue

            # Still RECOMPUTING while listeners run: their input changes coalesce
            self.publish_count += 1
            self.logger.info(
                "Snapshot published",
                reason=reason,
                generation=snapshot.generation,
                unit=snapshot.unit.value,
                days=len(self.store),
            )
            self.snapshots.publish(snapshot)

            if not self._pending:
                break
            reason = "listener"

        self.state = ControllerState.PUBLISHED

    def _settle(self) -> None:
        self.state = (
            ControllerState.PUBLISHED if self.snapshots.value is not None else ControllerState.IDLE
        )

    def _read_inputs(self) -> RecomputeInputs:
        if self._samples_dirty:
            self.store.ingest(self.feeds.samples.value)
            self._samples_dirty = False

        return RecomputeInputs(
            generation=self._generation,
            as_of=self.clock(),
            unit=self.feeds.unit.value,
            target=self.feeds.target.value,
            today_value=self.feeds.today.value,
        )

    def _compute(self, inputs: RecomputeInputs) -> Snapshot:
        mapper = DisplayMapper(self.kind, inputs.unit)
        as_of = inputs.as_of

        # Base-unit aggregation
        chart = self.aggregator.chart_series(self.store, as_of, days=self.chart_days)
        averages = self.aggregator.period_averages(self.kind, self.store, as_of)
        monthly = self.aggregator.monthly_series(
            self.kind, self.store, as_of, months=self.monthly_months
        )
        current = self.aggregator.resolve_current(inputs.today_value, self.store, as_of)
        target = inputs.target if inputs.target is not None and inputs.target > 0 else None

        # Display unit
        chart_points = mapper.map_chart_series(chart)
        period_entries = mapper.map_period_averages(averages)
        monthly_entries = mapper.map_monthly(monthly)

        # Scales, each from its own display values
        daily_scale = self.scale_calculator.scale(
            [p.value for p in chart_points], self.kind, inputs.unit
        )
        period_scale = self.scale_calculator.scale(
            [float(e.value) for e in period_entries], self.kind, inputs.unit
        )
        monthly_scale = self.scale_calculator.scale(
            [float(e.value) for e in monthly_entries], self.kind, inputs.unit, monthly=True
        )

        delta_text, delta_tone = mapper.format_kpi_delta(current, target)

        return Snapshot(
            kind=self.kind,
            unit=inputs.unit,
            generation=inputs.generation,
            as_of=as_of,
            generated_at=datetime.now(UTC),
            today_value=current,
            target_value=target,
            chart_series=tuple(chart_points),
            period_averages=tuple(period_entries),
            monthly_series=tuple(monthly_entries),
            daily_scale=daily_scale,
            period_scale=period_scale,
            monthly_scale=monthly_scale,
            current_text=mapper.format_current(current),
            target_text=mapper.format_target(target),
            delta_text=delta_text,
            delta_tone=delta_tone,
            remaining_to_target=mapper.remaining_to_target(current, target),
        )
