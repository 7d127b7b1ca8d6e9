"""
DMN Runtime - Command Executor

Dispatches units of work synchronously. Failures are logged and re-raised
unchanged; there is no retry at this layer.
"""

from typing import Any
import logging
import time

from .commands import Command, CommandContext

logger = logging.getLogger(__name__)


class CommandExecutor:
    """Runs commands against the shared command context."""
    
    def __init__(self, command_context: CommandContext):
        self.command_context = command_context
    
    def execute(self, command: Command) -> Any:
        """
        Run a command to completion.
        
        Args:
            command: The unit of work to run
        
        Returns:
            Whatever the command returns
        """
        unit = command.unit_of_work.value
        decision_id = command.context.decision_id
        logger.debug(f"Dispatching {unit} for {decision_id}")
        start_time = time.time()
        
        try:
            result = command.execute(self.command_context)
        except Exception as e:
            logger.error(f"Unit of work {unit} failed for {decision_id}: {e}")
            raise
        
        execution_ms = int((time.time() - start_time) * 1000)
        logger.debug(f"Finished {unit} for {decision_id} in {execution_ms}ms")
        return result
