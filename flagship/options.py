r"""
Flagship option definitions: normalizer, option entity, and registry.

Overview
- Definition normalizer
  • classify(values): pure function tagging up to four loosely-typed positional
    values with the role they play (short flag, long name, description, argument).
  • normalize(*values, **config): turn the tagged slots into a canonical
    Definition(short, long, description, mode) and merge explicit keywords.

- Option
  • One declared option: identifiers, description, argument mode, switch/default/
    callback metadata and its runtime value for the current parse.

- Registry
  • Insertion-ordered collection of the options of one parsing session, with
    first-match lookup by short flag or long name.

Positional heuristic
- A first value that is a string longer than one character is a long name, not
  a short flag; a placeholder is inserted for the missing short flag.
- A long-name candidate that is not made of letters, underscores, and hyphens is
  a description; the remaining values shift one slot to the right.
- A literal True where the description goes means "requires an argument".

Quick example:
    >>> normalize("n", "name", "Your name", True)
    Definition(short='n', long='name', description='Your name', mode=<Mode.REQUIRED: 'required'>)
    >>> normalize("n", True)
    Definition(short='n', long=None, description=None, mode=<Mode.REQUIRED: 'required'>)
    >>> normalize("verbose", "Enable verbose mode")
    Definition(short=None, long='verbose', description='Enable verbose mode', mode=<Mode.NONE: 'none'>)
"""
import functools
import operator
import re
from enum import Enum
from typing import NamedTuple

from .utils import *


class Mode(Enum):
    """
    Argument requirement of an option.

    - NONE: presence only, never consumes the following token.
    - REQUIRED: must be followed by a non-flag token, otherwise parsing fails.
    - OPTIONAL: consumes the following token only when it is not flag-like.
    """
    NONE = "none"
    REQUIRED = "required"
    OPTIONAL = "optional"

    @property
    def takes(self):
        """
        Whether options in this mode may consume an argument token.
        """
        return self is not Mode.NONE


class Role(Enum):
    """
    Role of a positional definition value after classification.
    """
    SHORT = "short"
    LONG = "long"
    DESCRIPTION = "description"
    ARGUMENT = "argument"


class Slot(NamedTuple):
    """
    A positional definition value tagged with its inferred role.
    """
    role: Role
    value: object


class Definition(NamedTuple):
    """
    Canonical option definition produced by normalize().
    """
    short: str | None
    long: str | None
    description: str | None
    mode: Mode


_ROLES = (Role.SHORT, Role.LONG, Role.DESCRIPTION, Role.ARGUMENT)
_LONG = re.compile(r"[A-Za-z_-]+")
_KEYWORDS = frozenset((
    "short",
    "long",
    "description",
    "argument",
    "optional",
    "mode",
    "switch",
    "default",
    "callback",
))


def classify(values, /):
    """
    Tag positional definition values with their roles.

    Steps (order matters)
    1. No first value, or a first value that is a string longer than one
       character: insert the "no short flag" placeholder (None) in front.
    2. Pad with Unset to three values; a third value gets a fourth one meaning
       "argument not required" (False).
    3. A set value in the long slot that is not a string of letters, underscores
       and hyphens is a description: the tail shifts one slot to the right and
       the long slot becomes unset.
    4. A literal True in the description slot means "requires an argument":
       the description becomes unset and the argument slot becomes True.

    Parameters
    - values: Sequence of at most four values.

    Returns
    - tuple[Slot, Slot, Slot, Slot] in role order (short, long, description, argument).

    Raises
    - TypeError: when more than four values are given.
    """
    values = list(values)
    if len(values) > 4:
        raise TypeError("option definitions take at most 4 positional values but %d were given" % len(values))

    if not values or (isinstance(values[0], str) and len(values[0]) > 1):
        values.insert(0, None)

    while len(values) < 3:
        values.append(Unset)
    if len(values) == 3:
        values.append(False)

    long = values[1]
    if long is not Unset and long is not None and not (isinstance(long, str) and _LONG.fullmatch(long)):
        values = [values[0], Unset, *values[1:3]]

    if values[2] is True:
        values[2] = Unset
        values[3] = True

    # A fifth value (after a placeholder or a shift) has no role.
    return tuple(map(Slot, _ROLES, values[:4]))


def _mode(argument):
    """
    Map an argument-slot value to a Mode.
    """
    if isinstance(argument, Mode):
        return argument
    if argument is True:
        return Mode.REQUIRED
    if argument is False or argument is None or argument is Unset:
        return Mode.NONE
    raise TypeError("option 'argument' must be a boolean or a mode")


def normalize(*values, **config):
    """
    Turn loosely-typed definition values into a canonical Definition.

    Keywords always win over inferred positional values:
    - short, long, description: replace the matching slot.
    - argument: bool or Mode for the argument slot.
    - mode: Mode, same as argument.
    - optional: when true, the option takes an optional argument.
    - switch, default, callback: accepted here and consumed by Option.

    Returns
    - Definition(short, long, description, mode)

    Raises
    - TypeError: on more than four values, unknown keywords, or a bad argument value.

    Notes
    - Normalizing an already canonical (short, long, description, mode) tuple
      returns it unchanged.
    """
    if unknown := config.keys() - _KEYWORDS:
        raise TypeError("unexpected option keyword(s): %s" % ", ".join(sorted(unknown)))

    slots = {slot.role: coalesce(slot.value) for slot in classify(values)}

    for role in (Role.SHORT, Role.LONG, Role.DESCRIPTION):
        if role.value in config:
            slots[role] = config[role.value]

    argument = slots[Role.ARGUMENT]
    if "argument" in config:
        argument = config["argument"]
    if "mode" in config:
        argument = config["mode"]
    mode = _mode(argument)
    if config.get("optional"):
        mode = Mode.OPTIONAL

    return Definition(slots[Role.SHORT], slots[Role.LONG], slots[Role.DESCRIPTION], mode)


def _sanitize_definition(cls, definition, /):
    """
    Internal: validate a canonical definition against the option invariants.

    Raises
    - TypeError: identifiers or description of the wrong type.
    - ValueError: no identifier at all, a short flag that is not one character,
      or an empty long name.
    """
    short, long, description, mode = definition

    if short is not None:
        if not isinstance(short, str):
            raise TypeError(f"{cls.__name__.lower()} 'short' must be a string")
        elif len(short) != 1:
            raise ValueError(f"{cls.__name__.lower()} 'short' must be exactly one character")

    if long is not None:
        if not isinstance(long, str):
            raise TypeError(f"{cls.__name__.lower()} 'long' must be a string")
        elif not long:
            raise ValueError(f"{cls.__name__.lower()} 'long' cannot be empty")

    if short is None and long is None:
        raise ValueError(f"{cls.__name__.lower()} must specify a short flag or a long name")

    if description is not None and not isinstance(description, str):
        raise TypeError(f"{cls.__name__.lower()} 'description' must be a string")

    if not isinstance(mode, Mode):
        raise TypeError(f"{cls.__name__.lower()} 'mode' must be a mode")


class Option:
    """
    One declared option and its runtime value.

    Construction goes through the definition normalizer, so Option accepts the
    same loose positional values as Parser.on():

        Option("n", "name", "Your name", True)
        Option("v", "verbose", "Verbose output", switch=True)
        Option("level", optional=True, default="info")

    Properties
    - short, long, description, mode, switch, default, callback: read-only metadata.
    - key: long name when set, otherwise the short flag.
    - names: token spellings that reach this option ("-n", "--name").
    - value: runtime value of the current parse (None while unset).
    - present: whether the option was recognized during the current parse.
    """

    __displayable__ = (
        "key",
        "mode",
        "switch",
        "value",
        "present",
    )

    short = mirror("short")
    long = mirror("long")
    description = mirror("description")
    mode = mirror("mode")
    switch = mirror("switch")
    callback = mirror("callback")

    def __init__(self, *values, **config):
        definition = normalize(*values, **config)
        _sanitize_definition(type(self), definition)

        if (callback := config.get("callback")) is not None and not callable(callback):
            raise TypeError("option 'callback' must be callable")

        self._short, self._long, self._description, self._mode = definition
        self._switch = bool(config.get("switch", False))
        self._default = config.get("default", Unset)
        self._callback = callback
        self.reset()

    @property
    def key(self):
        """
        Canonical identifier used in exported mappings and error messages.
        """
        return self._long if self._long is not None else self._short

    @property
    def names(self):
        names = ()
        if self._short is not None:
            names += ("-" + self._short,)
        if self._long is not None:
            names += ("--" + self._long,)
        return names

    @property
    def default(self):
        return coalesce(self._default)

    @property
    def declared(self):
        """
        Whether a default was declared (a None default counts).
        """
        return self._default is not Unset

    @property
    def value(self):
        return coalesce(self._value)

    @property
    def present(self):
        return self._present

    @property
    def effective(self):
        """
        Runtime value when one was assigned, otherwise the default (None if undeclared).
        """
        return coalesce(self._value, self.default)

    @property
    def exported(self):
        """
        Whether this option belongs in ParseResult.to_dict().
        """
        return self._mode is Mode.REQUIRED or self.declared

    def matches(self, name, /):
        """
        Whether name equals this option's short flag or long name.
        """
        return name is not None and name in (self._short, self._long)

    def reset(self):
        """
        Forget the runtime state of a previous parse.
        """
        self._value = Unset
        self._present = False

    def recognize(self):
        """
        Mark the option as seen in the current parse.
        """
        self._present = True

    def assign(self, value, /):
        self._value = value

    def toggle(self):
        """
        Flip the boolean value of a switch (starting from a boolean default).
        """
        current = self._value
        if current is Unset:
            current = self._default if isinstance(self._default, bool) else False
        self._value = not current
        return self._value

    def __call__(self):
        """
        Fire the bound callback, if any.
        """
        if self._callback is not None:
            return self._callback()

    def __repr__(self):
        return f"option({', '.join(map(functools.partial(operator.mod, '%s=%r'), self.__rich_repr__()))})"

    def __rich_repr__(self):
        for name in self.__displayable__:
            yield name, getattr(self, name)


class Registry:
    """
    Insertion-ordered options of one parsing session.

    Lookup is first-match by short flag or long name; registering two options
    that share an identifier is rejected.
    """

    def __init__(self, options=()):
        self._options = []
        for option in options:
            self.add(option)

    def add(self, option, /):
        """
        Register an option and return it.

        Raises
        - TypeError: when option is not an Option.
        - ValueError: when the option (or one of its identifiers) is already registered.
        """
        if not isinstance(option, Option):
            raise TypeError("registry entries must be options")
        if any(existing is option for existing in self._options):
            raise ValueError(f"option {option.key!r} is already registered")
        for name in (option.short, option.long):
            if self.lookup(name) is not None:
                raise ValueError(f"option identifier {name!r} is already registered")
        self._options.append(option)
        return option

    def lookup(self, name, /):
        """
        First option whose short flag or long name equals name, else None.
        """
        for option in self._options:
            if option.matches(name):
                return option
        return None

    def reset(self):
        for option in self._options:
            option.reset()

    def __iter__(self):
        return iter(self._options)

    def __len__(self):
        return len(self._options)

    def __contains__(self, object, /):
        if isinstance(object, Option):
            return any(option is object for option in self._options)
        return self.lookup(object) is not None

    def __repr__(self):
        return f"registry({', '.join(option.key for option in self._options)})"

    def __rich_repr__(self):
        for option in self._options:
            yield option


__all__ = (
    "Mode",
    "Role",
    "Slot",
    "Definition",
    "Option",
    "Registry",
    "classify",
    "normalize",
)
