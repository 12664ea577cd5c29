"""
termsurvey: ask typed questions in a terminal and store the answers in your own objects.
"""

from termsurvey.config import IconSet, PromptConfig, Stdio
from termsurvey.core.cancellation import CancellationToken
from termsurvey.core.kinds import (
    Float32, Float64, Int8, Int16, Int32, Int64, Uint, Uint8, Uint16, Uint32, Uint64,
)
from termsurvey.core.option_answer import OptionAnswer
from termsurvey.core.paginator import paginate
from termsurvey.core.writer import Ref, Settable, TAG_KEY, find_field, write_answer
from termsurvey.errors import (
    ConversionError,
    DestinationError,
    EditorError,
    FieldNotMatch,
    InputError,
    Interrupted,
    MapType,
    NeedsPointer,
    NoDestination,
    SurveyError,
    UnsupportedType,
    ValidationError,
)
from termsurvey.prompts import (
    Confirm, Editor, Input, Multiline, MultiSelect, Password, Prompt, Select,
)
from termsurvey.survey import Question, ask, ask_one
from termsurvey.transformers import compose_transformers, title, to_lower, transform_string
from termsurvey.validators import (
    compose_validators, max_items, max_length, min_items, min_length, required,
)

__version__ = '0.1.0'
