"""
Parameter store abstraction for per-item node parameter reads.

Hosts evaluate node parameters (often expressions over upstream data) per
input item. ``ParameterStore`` is the read-only view the resolvers consume:
``get_parameter`` raises on absence, while ``find_parameter``/``get_bool``
give the optional reads used where a missing value is not an error.
"""

from __future__ import annotations

import copy
import logging
from abc import ABC, abstractmethod
from typing import Any, Mapping, Optional, Sequence

from dynamic_credentials.exceptions import ParameterNotFoundError, ParameterTypeError

logger = logging.getLogger(__name__)


class _Missing:
    def __repr__(self) -> str:
        return "MISSING"


MISSING: Any = _Missing()


class ParameterStore(ABC):
    """Read-only key/value lookup keyed by item index."""

    @abstractmethod
    def get_parameter(self, name: str, item_index: int = 0, default: Any = MISSING) -> Any:
        """
        Return the value of ``name`` for the given item.

        Raises:
            ParameterNotFoundError: if the parameter is absent and no default
                was given.
        """
        raise NotImplementedError

    def find_parameter(self, name: str, item_index: int = 0) -> Optional[Any]:
        """Return the value, or None when the parameter is absent."""
        try:
            return self.get_parameter(name, item_index)
        except ParameterNotFoundError:
            return None

    def get_bool(self, name: str, item_index: int = 0, default: bool = False) -> bool:
        """
        Return a boolean parameter.

        Any read failure, and any non-bool value, gives ``default``.
        """
        try:
            value = self.get_parameter(name, item_index)
        except Exception as e:
            logger.debug("Reading %s for item %d failed: %s", name, item_index, e)
            return default
        if isinstance(value, bool):
            return value
        return default

    def get_string(self, name: str, item_index: int = 0, default: Any = MISSING) -> str:
        """
        Return a string parameter.

        Raises:
            ParameterNotFoundError: absent with no default.
            ParameterTypeError: present but not a string.
        """
        value = self.get_parameter(name, item_index, default)
        if not isinstance(value, str):
            raise ParameterTypeError(name, item_index, "a string", value)
        return value


class ItemParameterStore(ParameterStore):
    """
    In-memory parameter store.

    ``node_parameters`` apply to every item; ``item_parameters[i]`` holds the
    evaluated values for item ``i`` and takes precedence. Both are deep-copied
    on construction so later changes by the caller are not observed.

    Example:
        >>> store = ItemParameterStore(
        ...     {"useDynamicCredentials": True, "credentialType": "oauth2"},
        ...     [{"credentialPath": "token-for-row-0"}],
        ... )
        >>> store.get_parameter("credentialPath", 0)
        'token-for-row-0'
    """

    def __init__(
        self,
        node_parameters: Mapping[str, Any] | None = None,
        item_parameters: Sequence[Mapping[str, Any]] = (),
    ):
        self._node_parameters = copy.deepcopy(dict(node_parameters or {}))
        self._item_parameters = [copy.deepcopy(dict(p)) for p in item_parameters]

    def __len__(self) -> int:
        return len(self._item_parameters)

    def get_parameter(self, name: str, item_index: int = 0, default: Any = MISSING) -> Any:
        if 0 <= item_index < len(self._item_parameters):
            snapshot = self._item_parameters[item_index]
            if name in snapshot:
                return snapshot[name]
        if name in self._node_parameters:
            return self._node_parameters[name]
        if default is not MISSING:
            return default
        raise ParameterNotFoundError(name, item_index)
