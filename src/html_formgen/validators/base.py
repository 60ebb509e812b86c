"""
Validator base class and registry.

Validators auto-register by ``_type_id`` so specifications can refer to them
as ``{"name": "GreaterThan", "options": {"min": 5}}``.
"""

from typing import Any, Dict, List, Optional, Tuple, Type
import logging

from html_formgen.protocols import ValidatorInterface
from html_formgen.registry import RegistryMeta, resolve_component

logger = logging.getLogger(__name__)

# Maps normalized validator id -> validator class
VALIDATOR_IMPLEMENTATIONS: Dict[str, Type] = {}


class AbstractValidator(ValidatorInterface, metaclass=RegistryMeta):
    """
    Base class for validators with templated failure messages.

    Subclasses declare ``message_templates`` and call ``_error(key, **values)``
    from ``is_valid()``. Templates use ``str.format`` placeholders; ``{value}``
    is always available.
    """

    _registry = VALIDATOR_IMPLEMENTATIONS
    message_templates: Dict[str, str] = {}

    def __init__(self, messages: Optional[Dict[str, str]] = None):
        self._templates = dict(self.message_templates)
        if messages:
            self._templates.update(messages)
        self._messages: Dict[str, str] = {}
        self._value: Any = None

    def _setup(self, value: Any) -> None:
        self._messages = {}
        self._value = value

    def _error(self, key: str, **values: Any) -> bool:
        template = self._templates[key]
        self._messages[key] = template.format(value=self._value, **values)
        return False

    def get_messages(self) -> Dict[str, str]:
        return dict(self._messages)

    def set_message(self, key: str, template: str) -> None:
        """Override a single message template."""
        if key not in self._templates:
            raise KeyError(
                f"{type(self).__name__} has no message template '{key}'. "
                f"Available templates: {list(self._templates.keys())}"
            )
        self._templates[key] = template


class ValidatorChain(ValidatorInterface):
    """
    Ordered list of validators.

    Validators run in priority order (higher first, then attach order).
    A validator attached with ``break_chain_on_failure`` stops the chain when it fails.
    """

    def __init__(self):
        self._validators: List[Tuple[int, int, ValidatorInterface, bool]] = []
        self._messages: Dict[str, str] = {}

    def attach(self, validator: Any, break_chain_on_failure: bool = False, priority: int = 1) -> "ValidatorChain":
        """
        Attach a validator.

        Args:
            validator: Validator instance, class, registered id or name/options mapping
            break_chain_on_failure: Stop running later validators if this one fails
            priority: Higher priorities run first
        """
        instance = resolve_component(VALIDATOR_IMPLEMENTATIONS, validator, "validator", ValidatorInterface)
        self._validators.append((priority, len(self._validators), instance, break_chain_on_failure))
        return self

    def prepend(self, validator: Any, break_chain_on_failure: bool = False) -> "ValidatorChain":
        """Attach a validator ahead of everything already in the chain."""
        top = max((entry[0] for entry in self._validators), default=1)
        return self.attach(validator, break_chain_on_failure, priority=top + 1)

    def get_validators(self) -> List[ValidatorInterface]:
        ordered = sorted(self._validators, key=lambda entry: (-entry[0], entry[1]))
        return [entry[2] for entry in ordered]

    def has_validator(self, validator_class: Type) -> bool:
        return any(isinstance(entry[2], validator_class) for entry in self._validators)

    def is_valid(self, value: Any, context: Optional[Dict[str, Any]] = None) -> bool:
        self._messages = {}
        result = True
        for _, _, validator, break_on_failure in sorted(self._validators, key=lambda e: (-e[0], e[1])):
            if validator.is_valid(value, context):
                continue
            result = False
            self._messages.update(validator.get_messages())
            if break_on_failure:
                logger.debug(f"ValidatorChain: {type(validator).__name__} failed, breaking chain")
                break
        return result

    def get_messages(self) -> Dict[str, str]:
        return dict(self._messages)

    def __len__(self) -> int:
        return len(self._validators)
