"""Composition root.

Owns the lifecycle of the shared collaborators (settings, aggregator, scale
calculator) and wires one controller per metric. Nothing here is a global
singleton: callers build a pipeline and pass it where it is needed.
"""

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from datetime import date

import structlog

from health_trends.core.config import Settings, settings
from health_trends.models.metric import MetricKind
from health_trends.models.sample import DatedSample
from health_trends.schemas.snapshot import Snapshot
from health_trends.services.aggregator import PeriodAggregator
from health_trends.services.controller import MetricController, MetricFeeds
from health_trends.services.scale import ScaleCalculator


def configure_logging(config: Settings | None = None) -> None:
    """Configure structlog and the stdlib root logger."""
    config = config or settings
    level = getattr(logging, config.log_level)
    logging.basicConfig(format="%(message)s", level=level)
    logging.getLogger().setLevel(level)

    renderer = (
        structlog.dev.ConsoleRenderer()
        if config.log_format == "console"
        else structlog.processors.JSONRenderer()
    )

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


logger = structlog.get_logger()


@dataclass
class MetricPipeline:
    """Feeds and controller for one metric."""

    kind: MetricKind
    feeds: MetricFeeds
    controller: MetricController

    def snapshot(self) -> Snapshot | None:
        """Latest published snapshot."""
        return self.controller.current_snapshot()


@dataclass
class HealthTrends:
    """All metric pipelines sharing one set of collaborators."""

    config: Settings = field(default_factory=lambda: settings)
    aggregator: PeriodAggregator = field(default_factory=PeriodAggregator)
    scale_calculator: ScaleCalculator = field(default_factory=ScaleCalculator)
    clock: Callable[[], date] | None = None
    pipelines: dict[MetricKind, MetricPipeline] = field(default_factory=dict)

    def pipeline(
        self,
        kind: MetricKind,
        samples: Iterable[DatedSample] = (),
        target: float | None = None,
        today: float | None = None,
    ) -> MetricPipeline:
        """Get or build the pipeline for a metric.

        A new pipeline publishes its first snapshot immediately.
        """
        if kind in self.pipelines:
            return self.pipelines[kind]

        feeds = MetricFeeds.create(
            kind,
            self.config.unit_for(kind),
            samples=samples,
            target=target,
            today=today,
        )
        controller = MetricController(
            kind,
            feeds,
            aggregator=self.aggregator,
            scale_calculator=self.scale_calculator,
            clock=self.clock or self.config.today,
            chart_days=self.config.chart_days,
            monthly_months=self.config.monthly_months,
        )
        controller.request_recompute()

        pipeline = MetricPipeline(kind=kind, feeds=feeds, controller=controller)
        self.pipelines[kind] = pipeline
        logger.debug("Pipeline created", kind=kind.value, unit=feeds.unit.value.value)
        return pipeline

    def close(self) -> None:
        """Detach every controller from its feeds."""
        for pipeline in self.pipelines.values():
            pipeline.controller.close()
        self.pipelines.clear()
