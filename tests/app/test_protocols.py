from roamly.app.controllers.filters import FilterHandler
from roamly.app.protocols import FilterPanel, Presentation, Repository, ViewPort
from roamly.io.presentation import LoggingPresentation
from roamly.io.repository import InMemoryRepository, JsonDestinationRepository
from roamly.io.viewport import HeadlessViewPort
from roamly.sim.kernel import Kernel


def test_headless_adapters_satisfy_ports(tmp_path):
    assert isinstance(HeadlessViewPort(Kernel()), ViewPort)
    assert isinstance(LoggingPresentation(), Presentation)
    assert isinstance(InMemoryRepository(), Repository)
    assert isinstance(JsonDestinationRepository(tmp_path / "d.json"), Repository)
    assert isinstance(FilterHandler(), FilterPanel)


def test_partial_adapters_do_not():
    class HalfViewPort:
        def fit_to_route(self, start, end, opts, on_settled): ...

    assert not isinstance(HalfViewPort(), ViewPort)
    assert not isinstance(object(), Presentation)
