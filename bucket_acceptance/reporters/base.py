"""Base reporter interface."""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from bucket_acceptance.models import CheckResult, ScenarioResult


class Reporter(ABC):
    """Abstract base class for scenario result reporters."""

    @abstractmethod
    def on_check_start(self, scenario_name: str, check_id: str) -> None:
        """Called when a check starts."""
        pass

    @abstractmethod
    def on_check_complete(self, scenario_name: str, result: "CheckResult") -> None:
        """Called when a check completes."""
        pass

    @abstractmethod
    def on_scenario_start(self, scenario_name: str) -> None:
        """Called when a scenario begins."""
        pass

    @abstractmethod
    def on_scenario_complete(self, result: "ScenarioResult") -> None:
        """Called when a scenario completes, after teardown."""
        pass

    @abstractmethod
    def on_run_complete(self, results: dict[str, "ScenarioResult"]) -> None:
        """Called when all scenarios are complete."""
        pass
