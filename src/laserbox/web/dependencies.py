"""FastAPI dependency injection for box services."""

from typing import Annotated

from fastapi import Depends

from laserbox.application import GenerateBoxCommand


def get_generate_command() -> GenerateBoxCommand:
    """Dependency for GenerateBoxCommand."""
    return GenerateBoxCommand()


# Type aliases for cleaner endpoint signatures
GenerateCommandDep = Annotated[GenerateBoxCommand, Depends(get_generate_command)]
