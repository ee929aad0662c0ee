"""
Program-side building blocks: update fields, instructions, builders, outputs
and op dispatch.
"""

from .fields import Action  # noqa: F401
from .token import (  # noqa: F401
    TokenField,
    TokenUpdate,
    TokenUpdateField,
    build_token_update_field,
)
from .program import (  # noqa: F401
    ProgramField,
    ProgramUpdate,
    ProgramUpdateField,
    build_program_update_field,
)
from .updates import TokenOrProgramUpdate, UpdateKind  # noqa: F401
from .instructions import (  # noqa: F401
    BurnInstruction,
    CreateInstruction,
    Instruction,
    InstructionKind,
    LogInstruction,
    TokenDistribution,
    TransferInstruction,
    UpdateInstruction,
)
from .builders import (  # noqa: F401
    TokenUpdateBuilder,
    build_burn_instruction,
    build_create_instruction,
    build_log_instruction,
    build_mint_instructions,
    build_program_data_update_instruction,
    build_program_metadata_update_instruction,
    build_token_distribution_instruction,
    build_token_metadata_update_instruction,
    build_transfer_instruction,
    build_update_instruction,
)
from .outputs import Outputs  # noqa: F401
from .dispatch import Program  # noqa: F401

__all__ = [
    "Action",
    # Update fields
    "TokenField", "TokenUpdateField", "TokenUpdate", "build_token_update_field",
    "ProgramField", "ProgramUpdateField", "ProgramUpdate", "build_program_update_field",
    "TokenOrProgramUpdate", "UpdateKind",
    # Instructions
    "InstructionKind", "Instruction", "TokenDistribution",
    "CreateInstruction", "UpdateInstruction", "TransferInstruction",
    "BurnInstruction", "LogInstruction",
    # Builders
    "build_create_instruction", "build_update_instruction",
    "build_transfer_instruction", "build_burn_instruction",
    "build_log_instruction", "build_token_distribution_instruction",
    "build_mint_instructions",
    "build_program_metadata_update_instruction",
    "build_program_data_update_instruction",
    "build_token_metadata_update_instruction",
    "TokenUpdateBuilder",
    # Outputs / dispatch
    "Outputs", "Program",
]
