"""Chat completion collaborator interface."""

from abc import abstractmethod

from ..models.agent_models import AgentDefinition, Message
from .service_interface import IService


class IChatCompletionService(IService):
    """Produces an agent's next reply from the shared conversation history."""

    @abstractmethod
    async def get_reply(
        self,
        agent: AgentDefinition,
        history: list[Message],
        current_sequence: list[int] | None = None,
    ) -> Message:
        """
        Produce the next reply for ``agent``.

        The service may call any of the agent's tools and fold the result into
        the reply text. Tool output worth keeping (such as a generated
        sequence) is returned in the message metadata.

        Args:
            agent: The agent whose turn it is
            history: The transcript so far, oldest first
            current_sequence: The last sequence produced in this session, which
                may predate the transcript when it is reset between questions

        Returns:
            An assistant message authored by ``agent.name``
        """
        pass
