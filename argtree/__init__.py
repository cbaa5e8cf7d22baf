
from argtree.values import (Validator,
                            RangeValidator,
                            ChoicesValidator,
                            register_type,
                            get_validator)

from argtree.errors import (ArgtreeException,
                            SchemaError,
                            ConversionError,
                            ArgumentParseError,
                            UnknownOption,
                            UnknownCommand,
                            DuplicateOption,
                            MissingOption,
                            ArgumentArityError,
                            NotEnoughArguments,
                            TooManyArguments,
                            InvalidArgument,
                            InvalidOptionExpression)

from argtree.schema import Argument, Option
from argtree.parser import Parser, allocate_counts
from argtree.result import ParseResult, MatchedOption, MatchedArgument
from argtree.command import Command, CommandLineError
from argtree.help import HelpHandler
from argtree.suggest import get_distance, get_suggestions
