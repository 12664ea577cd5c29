from termsurvey.prompts.base import LineBuffer, LinePrompt, Prompt, PromptState
from termsurvey.prompts.confirm import Confirm
from termsurvey.prompts.editor import Editor
from termsurvey.prompts.input import Input
from termsurvey.prompts.multiline import Multiline
from termsurvey.prompts.multiselect import MultiSelect
from termsurvey.prompts.password import Password
from termsurvey.prompts.select import Select

__all__ = [
    'Prompt', 'LinePrompt', 'LineBuffer', 'PromptState',
    'Confirm', 'Editor', 'Input', 'Multiline', 'MultiSelect', 'Password', 'Select',
]
