"""Create a collection, capped or not."""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from poolstat.core.protocols.command import CommandSession, WriteBinding
from poolstat.operations.helpers import execute_wrapped_command, execute_wrapped_command_async


class CreateCollectionOptions(BaseModel):
    """Options for the ``create`` command."""

    model_config = ConfigDict(frozen=True)

    collection_name: str = Field(min_length=1)
    capped: bool = False
    size_in_bytes: int = Field(default=0, ge=0)
    auto_index: bool = True
    max_documents: int = Field(default=0, ge=0)
    use_power_of_2_sizes: Optional[bool] = None

    def as_document(self) -> dict[str, Any]:
        """Build the command document. Key order matters: ``create`` comes first."""
        document: dict[str, Any] = {"create": self.collection_name}
        if self.capped:
            document["capped"] = True
            document["size"] = self.size_in_bytes
            if self.max_documents > 0:
                document["max"] = self.max_documents
        if not self.auto_index:
            document["autoIndexId"] = False
        if self.use_power_of_2_sizes is not None:
            document["usePowerOf2Sizes"] = self.use_power_of_2_sizes
        return document


class CreateCollectionOperation:
    """Send a ``create`` command for one collection.

    Args:
        database_name: Database the collection is created in.
        options: What to create.
    """

    def __init__(self, database_name: str, options: CreateCollectionOptions) -> None:
        if not database_name:
            raise ValueError("database_name can not be empty")
        if options is None:
            raise ValueError("options can not be None")
        self.database_name = database_name
        self.options = options

    def execute(self, binding: WriteBinding) -> None:
        """Create the collection, blocking until the server replies.

        Raises:
            CommandError: If the server rejects the command.
        """
        execute_wrapped_command(self.database_name, self.options.as_document(), binding)

    async def execute_async(self, session: CommandSession) -> None:
        """Create the collection over an async session.

        Raises:
            CommandError: If the server rejects the command.
        """
        await execute_wrapped_command_async(self.database_name, self.options.as_document(), session)
