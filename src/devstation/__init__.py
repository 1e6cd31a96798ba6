from .dsl import step, plan, StepBuilder, build
from .runner import run_steps, check_steps, load_plan, ProvisioningError
from .model import Step, StepContext, StepResult, StepStatus, FailureKind, Presence, RunReport
from .dag import PlanError

__all__ = [
    "step",
    "plan",
    "StepBuilder",
    "build",
    "run_steps",
    "check_steps",
    "load_plan",
    "ProvisioningError",
    "PlanError",
    "Step",
    "StepContext",
    "StepResult",
    "StepStatus",
    "FailureKind",
    "Presence",
    "RunReport",
]
