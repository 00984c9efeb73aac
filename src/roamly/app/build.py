# roamly/app/build.py
from collections.abc import Mapping
from dataclasses import dataclass

from roamly.app.controllers.animation import AnimationClock
from roamly.app.controllers.catalog import CatalogHandler
from roamly.app.controllers.filters import FilterHandler
from roamly.app.controllers.journey import JourneyController
from roamly.app.protocols import Presentation, Repository, ViewPort
from roamly.app.wiring import wire
from roamly.config.models import AppModel
from roamly.io.kernel_logging import KernelLogging, configure_logging
from roamly.io.presentation import LoggingPresentation
from roamly.io.recorder import JsonlSink, Recorder, Sink
from roamly.io.repository import JsonDestinationRepository
from roamly.io.viewport import HeadlessViewPort
from roamly.sim.hooks import NoopHooks
from roamly.sim.kernel import Kernel, Pacer


@dataclass
class App:
    config: AppModel
    kernel: Kernel
    animation: AnimationClock
    journey: JourneyController
    filters: FilterHandler
    catalog: CatalogHandler
    viewport: ViewPort
    presentation: Presentation
    repository: Repository
    recorder: Recorder


def build(
    cfg: AppModel | Mapping | None = None,
    *,
    viewport: ViewPort | None = None,
    presentation: Presentation | None = None,
    repository: Repository | None = None,
    sinks: tuple[Sink, ...] = (),
    pacer: Pacer | None = None,
    use_logging: bool = True,
) -> App:
    # 0) Validate config
    if cfg is None:
        model = AppModel()
    else:
        model = cfg if isinstance(cfg, AppModel) else AppModel.model_validate(cfg)

    # 1) Recorder for journey analytics
    recorder = Recorder(*(sinks or (JsonlSink(),)))

    # 2) Kernel (with hooks)
    if use_logging:
        configure_logging("roamly", level=model.log.level)
        hooks = KernelLogging(
            run_id=model.run_id,
            recorder=recorder,
            level=model.log.level,
            debug=model.log.debug,
            sample_every=model.log.sample_every,
        )
        report = hooks.biz
    else:
        hooks = NoopHooks()
        report = recorder.emit
    kernel = Kernel(hooks=hooks, pacer=pacer)

    # 3) Collaborators (headless defaults)
    viewport = viewport if viewport is not None else HeadlessViewPort(kernel)
    presentation = presentation if presentation is not None else LoggingPresentation()
    repository = repository if repository is not None else JsonDestinationRepository(model.data.path)

    # 4) Handlers (inject deps explicitly)
    anim = model.animation
    animation = AnimationClock(
        kernel,
        frame_interval_ms=anim.frame_interval_ms,
        landing_grace_ms=anim.landing_grace_ms,
    )
    filters = FilterHandler()
    catalog: CatalogHandler | None = None

    journey = JourneyController(
        kernel,
        animation,
        viewport,
        presentation,
        settings=anim,
        view=model.view,
        destinations=lambda: catalog.visible() if catalog else [],
        marker_click=lambda d: catalog.on_marker_click(d) if catalog else False,
        report=report,
        run_id=model.run_id,
    )
    catalog = CatalogHandler(repository, journey, filters, viewport, presentation, view=model.view)

    # 5) Wiring
    wire(kernel, journey=journey, animation=animation, viewport=viewport)

    return App(
        model, kernel, animation, journey, filters, catalog, viewport, presentation, repository, recorder
    )
