"""
LASR SDK for Python
Build, validate and serialize ledger instructions from program code.
"""

from .version import __version__  # noqa: F401

# Core config & errors
from .config import SDKConfig  # noqa: F401
from .errors import (  # noqa: F401
    InvalidAddress,
    InvalidAmount,
    LasrSdkError,
    MalformedInput,
    MissingRequiredField,
    UnsupportedAction,
)
from .consts import ETH_PROGRAM_ADDRESS, THIS, ZERO_VALUE  # noqa: F401

# Amounts & addresses
from .amount import (  # noqa: F401
    U256,
    format_amount_to_hex,
    format_bigint_to_hex,
    format_hex_to_amount,
    parse_amount_to_bigint,
)
from .address import Address, AddressOrNamespace, Namespace  # noqa: F401

# Input envelope
from .types import ComputeInputs, Transaction, parse_compute_inputs  # noqa: F401

# Validation helpers
from .utils import (  # noqa: F401
    check_if_values_are_undefined,
    get_undefined_properties,
    validate,
    validate_and_create_json_string,
)

# Programs
from .programs import (  # noqa: F401
    Instruction,
    Outputs,
    Program,
    ProgramUpdate,
    TokenOrProgramUpdate,
    TokenUpdate,
    TokenUpdateBuilder,
    build_burn_instruction,
    build_create_instruction,
    build_log_instruction,
    build_mint_instructions,
    build_program_data_update_instruction,
    build_program_metadata_update_instruction,
    build_program_update_field,
    build_token_distribution_instruction,
    build_token_metadata_update_instruction,
    build_token_update_field,
    build_transfer_instruction,
    build_update_instruction,
)

__all__ = [
    "__version__",
    # Core
    "SDKConfig",
    "LasrSdkError", "InvalidAmount", "InvalidAddress", "UnsupportedAction",
    "MissingRequiredField", "MalformedInput",
    "THIS", "ZERO_VALUE", "ETH_PROGRAM_ADDRESS",
    # Amounts & addresses
    "U256", "parse_amount_to_bigint", "format_amount_to_hex",
    "format_bigint_to_hex", "format_hex_to_amount",
    "Address", "AddressOrNamespace", "Namespace",
    # Envelope
    "ComputeInputs", "Transaction", "parse_compute_inputs",
    # Validation
    "get_undefined_properties", "check_if_values_are_undefined",
    "validate", "validate_and_create_json_string",
    # Programs
    "Instruction", "Outputs", "Program",
    "TokenUpdate", "ProgramUpdate", "TokenOrProgramUpdate", "TokenUpdateBuilder",
    "build_token_update_field", "build_program_update_field",
    "build_create_instruction", "build_update_instruction",
    "build_transfer_instruction", "build_burn_instruction",
    "build_log_instruction", "build_token_distribution_instruction",
    "build_mint_instructions",
    "build_program_metadata_update_instruction",
    "build_program_data_update_instruction",
    "build_token_metadata_update_instruction",
]
