"""Background workers for the recurring invoice service"""
from .recurring_generation import RecurringGenerationWorker

__all__ = ["RecurringGenerationWorker"]
