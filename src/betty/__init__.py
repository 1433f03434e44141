"""Betty — an ArchieML parser producing plain dicts, lists and scalars."""

from .assembler import Assembler, assemble
from .document import Document, parse, parse_document
from .errors import BettyError, OptionsError, SerializationError
from .instruction import Instruction, InstructionType
from .model import ArrayKind, NodeInfo
from .options import ParseOptions
from .preprocess import preprocess
from .reader import Reader, read_instructions
from .tokenizer import Token, TokenType, tokenize
from .values import coerce_scalar
from .writer import dumps

__all__ = [
    "parse",
    "parse_document",
    "Document",
    "ParseOptions",
    "dumps",
    "coerce_scalar",
    "tokenize",
    "Token",
    "TokenType",
    "Reader",
    "read_instructions",
    "Instruction",
    "InstructionType",
    "preprocess",
    "Assembler",
    "assemble",
    "ArrayKind",
    "NodeInfo",
    "BettyError",
    "OptionsError",
    "SerializationError",
]
