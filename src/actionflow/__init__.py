from .dag import schedule
from .errors import WorkflowError
from .model import Action, ActionId, CompiledWorkflow, Event, Workflow
from .runner import compile_workflow, load_workflow, plan, run_workflow

__all__ = [
    "schedule",
    "WorkflowError",
    "Action",
    "ActionId",
    "CompiledWorkflow",
    "Event",
    "Workflow",
    "compile_workflow",
    "load_workflow",
    "plan",
    "run_workflow",
]
