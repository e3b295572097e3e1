"""
Flagship parser layer: register options, scan tokens, query results.

What this module provides
- Parser: one parsing session. Owns its option registry, its positional names,
  and the result of its last parse.
  • on(...) registers an option from loose positional values (see options.normalize).
  • option(...) does the same as a decorator, binding the decorated callable as
    the option callback.
  • parse(items) walks the tokens once and returns a ParseResult.
  • str(parser) / parser.help() render a banner line and one line per option.

- ParseResult: leftovers, positional bindings, and the registry with updated
  values, plus the accessors (option_for, value_for, present, to_dict).

- Token helpers: isflaglike(token), flagname(token), tokenize(items).
- parse(items, configure): build a parser through an explicit configure
  function, parse, and return the parser.

Scanning rules
- A flag-like token with no matching option is dropped: it never becomes a
  leftover and never binds a positional name.
- An option that takes an argument looks at the token right after it in the
  original sequence. A flag-like or missing token is never consumed.
- The scan keeps a cursor over the unmodified token list and a count of
  consumed argument tokens still to skip.

Quick start
    from flagship import Parser

    def configure(parser):
        parser.banner = "Usage: greet [options] NAME"
        parser.on("n", "name", "Name to greet", True)
        parser.on("v", "verbose", "Verbose output")
        parser.positional("target")

    parser = Parser.build(configure)
    result = parser.parse(["-n", "Lee", "--verbose", "world"])
    result.value_for("name")     # "Lee"
    result.value_for("target")   # "world"
    result.leftovers             # ("world",)
"""
import functools
import operator
import os.path
import sys
from collections import defaultdict, deque
from collections.abc import Iterable

from rich.console import Console, Group
from rich.table import Table
from rich.text import Text

from .faults import *
from .options import Mode, Option, Registry
from .utils import *


def isflaglike(token, /):
    """
    Whether token looks like an option flag.

    Rules
    - shorter than two characters: never.
    - second character is '-': a long flag, only with at least four characters
      ("--x" is not a long flag).
    - first character is '-': a short flag, only with at most three characters.
    - anything else: never.
    """
    if len(token) < 2:
        return False
    if token[1] == "-":
        return len(token) >= 4
    if token[0] == "-":
        return len(token) <= 3
    return False


def flagname(token, /):
    """
    Option name carried by a flag-like token.

    A two-character token names its second character ("-n" → "n"); any longer
    token drops its first two characters ("--name" → "name", "-nx" → "x").
    """
    if len(token) == 2:
        return token[1]
    return token[2:]


def tokenize(items=Unset, /):
    """
    Normalize parser input into a list of tokens.

    Parameters
    - items:
      • Unset: read tokens from sys.argv[1:].
      • str: split on runs of whitespace.
      • Iterable[str]: used item by item; every element must be a string.

    Raises
    - TypeError: when items is none of the above, or an element is not a string.
    """
    if items is Unset:
        return sys.argv[1:]
    if isinstance(items, str):
        return items.split()
    if isinstance(items, Iterable):
        tokens = list(items)
        if not all(isinstance(token, str) for token in tokens):
            raise TypeError("parse() argument must be a string or an iterable of strings")
        return tokens
    raise TypeError("parse() argument must be a string or an iterable of strings")


class ParseResult:
    """
    Outcome of one parse: leftovers, positional bindings, and the registry whose
    options now carry their runtime values.

    Lookups check options first (short flag or long name), then positional
    bindings.
    """

    __displayable__ = (
        "leftovers",
        "bindings",
    )

    registry = mirror("registry")
    leftovers = mirror("leftovers")
    bindings = mirror("bindings")

    def __init__(self, registry, leftovers=(), bindings=Unset):
        if not isinstance(registry, Registry):
            raise TypeError("ParseResult() first argument must be a registry")
        self._registry = registry
        self._leftovers = tuple(leftovers)
        self._bindings = dict(coalesce(bindings, {}))

    def option_for(self, name, /):
        """
        First option whose short flag or long name equals name, else None.
        """
        return self._registry.lookup(name)

    def value_for(self, name, default=None, /):
        """
        Value of the matching option (None while unset), else the positional
        value bound to name, else default.
        """
        try:
            return self[name]
        except KeyError:
            return default

    def present(self, name, /):
        """
        Whether an option matching name was recognized during the parse.
        """
        option = self._registry.lookup(name)
        return option is not None and option.present

    def to_dict(self):
        """
        Map option keys to their value (or default when unset).

        Only options that take an argument or declare a default are exported;
        presence-only flags and switches without a default are left out.
        """
        return {option.key: option.effective for option in self._registry if option.exported}

    def __getitem__(self, name, /):
        if (option := self._registry.lookup(name)) is not None:
            return option.value
        try:
            return self._bindings[name]
        except KeyError:
            raise KeyError(name) from None

    def __contains__(self, name, /):
        return self._registry.lookup(name) is not None or name in self._bindings

    def __repr__(self):
        return f"parse-result({', '.join(map(functools.partial(operator.mod, '%s=%r'), self.__rich_repr__()))})"

    def __rich_repr__(self):
        for name in self.__displayable__:
            yield name, getattr(self, name)


class Parser:
    """
    One option-parsing session.

    Parameters
    - banner: str | None
      First line of the rendered help (usage line).
    - positionals: Iterable[str]
      Names bound, in order, to the first non-flag tokens.
    - strict: bool
      Warn (UnknownOptionWarning) about flag-like tokens that match no option.
      The tokens are dropped either way.
    - shell: bool
      Render faults with rich on stderr (and exit with status 1 on errors)
      instead of raising/warning.
    - fancy: bool
      Render faults inside a rich panel.
    - colorful: bool
      Style rendered faults and help.
    - prog: str
      Program name shown in fault headers; defaults to the basename of sys.argv[0].

    Notes
    - Every Parser owns its registry and results; nothing is shared between
      instances.
    - Parsing twice resets every option before the second scan.
    """

    positionals = mirror("positionals")
    registry = mirror("registry")
    result = mirror("result")

    def __init__(
            self,
            banner=None,
            /,
            *,
            positionals=(),
            strict=False,
            shell=False,
            fancy=False,
            colorful=True,
            prog=Unset
    ):
        if not isinstance(prog, str | Unset):
            raise TypeError("parser 'prog' must be a string")

        self.banner = banner
        self.strict = bool(strict)
        self.shell = bool(shell)
        self.fancy = bool(fancy)
        self.colorful = bool(colorful)
        self.prog = coalesce(prog, os.path.basename(sys.argv[0]) if sys.argv and sys.argv[0] else "flagship")

        self._registry = Registry()
        self._positionals = []
        self._result = ParseResult(self._registry)
        self.positional(*positionals)

    @property
    def banner(self):
        """
        First line of the rendered help, or None.
        """
        return self._banner

    @banner.setter
    def banner(self, banner):
        if banner is not None and not isinstance(banner, str):
            raise TypeError("parser 'banner' must be a string")
        self._banner = banner

    @classmethod
    def build(cls, configure, /, *args, **kwargs):
        """
        Create a parser and hand it to configure(parser) for registration.

        The configure function receives the parser explicitly; its return value
        is ignored. The configured parser is returned.
        """
        if not callable(configure):
            raise TypeError("build() first argument must be callable")
        self = cls(*args, **kwargs)
        configure(self)
        return self

    def on(self, *values, **config):
        """
        Register an option and return it.

        Accepts up to four loose positional values (short flag, long name,
        description, argument requirement) plus keywords that win over them:
        short, long, description, argument, optional, mode, switch, default,
        callback.

        Examples
        - parser.on("n", "name", "Your name", True)
        - parser.on("n", True)                      # short flag with a required argument
        - parser.on("verbose", "Verbose output")    # long name only
        - parser.on("l", "level", optional=True, default="info")
        """
        return self._registry.add(Option(*values, **config))

    def option(self, *values, **config):
        """
        Decorator form of on(): the decorated callable becomes the callback.

            @parser.option("V", "version", "Print the version")
            def version():
                print("1.0")
        """
        if "callback" in config:
            raise TypeError("@option() binds the decorated callable as callback")

        @rename("option")
        def wrapper(callback, /):
            if not callable(callback):
                raise TypeError("@option() must be applied to a callable")
            return self.on(*values, callback=callback, **config)

        return wrapper

    def positional(self, *names):
        """
        Declare positional names, bound in order to the first non-flag tokens.
        """
        for name in names:
            if not isinstance(name, str):
                raise TypeError("positional names must be strings")
            elif not name:
                raise ValueError("positional names cannot be empty")
            elif name in self._positionals:
                raise ValueError(f"positional name {name!r} is already declared")
        self._positionals.extend(names)

    def trigger(self, fault, /, **options):
        """
        Surface a fault with this parser's rendering options attached.
        """
        trigger(fault, **options, parser=self, shell=self.shell, fancy=self.fancy, colorful=self.colorful)

    def parse(self, items=Unset, /):
        """
        Scan tokens once and return the ParseResult.

        Per token
        - not flag-like: appended to the leftovers; binds the next pending
          positional name, if any.
        - flag-like without a matching option: dropped.
        - flag-like with a matching option:
          • the option is marked present and its callback fires right away;
          • a switch toggles its boolean value;
          • a presence-only option (switch or not) then gets True;
          • an option taking an argument reads the following token of the
            original sequence: a non-flag token is consumed as the value; a
            missing or flag-like token leaves an optional option unset and fails
            a required one with MissingCompulsoryArgumentError.

        A flag given twice keeps the last value.
        """
        tokens = tokenize(items)

        self._registry.reset()
        leftovers = []
        bindings = {}
        pending = deque(self._positionals)

        skip = 0
        for index, token in enumerate(tokens):
            if skip:
                skip -= 1
                continue

            if not isflaglike(token):
                leftovers.append(token)
                if pending:
                    bindings[pending.popleft()] = token
                continue

            option = self._registry.lookup(flagname(token))
            if option is None:
                if self.strict:
                    self.trigger(UnknownOptionWarning(
                        "unknown option %r at token %d was ignored" % (token, index + 1),
                        title="unknown option",
                        code=FaultCode.UNKNOWN_OPTION,
                        token=token,
                        index=index,
                        hint="check the spelling; registered options are: %s" % (
                            ", ".join(name for known in self._registry for name in known.names) or "none"
                        ),
                        docs=getdoc(FaultCode.UNKNOWN_OPTION),
                    ))
                continue

            option.recognize()
            option()

            if option.switch:
                option.toggle()

            if not option.mode.takes:
                option.assign(True)
                continue

            following = tokens[index + 1] if index + 1 < len(tokens) else Unset
            if following is Unset or isflaglike(following):
                if option.mode is Mode.REQUIRED:
                    self.trigger(MissingCompulsoryArgumentError(
                        "missing argument for option %r" % option.key,
                        title="missing compulsory argument",
                        code=FaultCode.MISSING_COMPULSORY_ARGUMENT,
                        key=option.key,
                        option=option,
                        token=token,
                        index=index,
                        hint="pass a value right after it (for example: %s <value>)" % token,
                        docs=getdoc(FaultCode.MISSING_COMPULSORY_ARGUMENT),
                    ))
                continue

            option.assign(following)
            skip = 1

        self._result = ParseResult(self._registry, leftovers, bindings)
        return self._result

    def option_for(self, name, /):
        return self._registry.lookup(name)

    def value_for(self, name, default=None, /):
        return self._result.value_for(name, default)

    def present(self, name, /):
        return self._result.present(name)

    def to_dict(self):
        return self._result.to_dict()

    @property
    def leftovers(self):
        return self._result.leftovers

    @property
    def bindings(self):
        return self._result.bindings

    def __getitem__(self, name, /):
        return self._result[name]

    def __contains__(self, name, /):
        return name in self._result

    def __iter__(self):
        return iter(self._registry)

    def __len__(self):
        return len(self._registry)

    def _columns(self):
        """
        Yield (short, long, description) display columns per option, registry order.
        """
        for option in self._registry:
            short = "-" + option.short if option.short is not None else ""
            if short and option.long is not None:
                short += ","
            long = "--" + option.long if option.long is not None else ""
            yield short, long, option.description or ""

    def __str__(self):
        """
        Plain help: the banner (when set), then one line per option.

            Usage: greet [options]
                -n, --name      Name to greet
                -v              Verbose output
                    --colour    Colourful output
        """
        columns = list(self._columns())
        width = max((len(long) for _, long, _ in columns), default=0)

        lines = [self._banner] if self._banner else []
        for short, long, description in columns:
            line = "    %-3s %-*s" % (short, width, long)
            if description:
                line += "    " + description
            lines.append(line.rstrip())
        return "\n".join(lines)

    def __rich__(self):
        """
        Rich help renderable.

        Palette keys
        - banner, short-name, long-name, option-description

        Customization
        - Define a mapping named __styles__ in __main__ to override any palette entry.
        - When colorful is False, styling is suppressed.
        """
        styles = defaultdict(str, {
            "banner": "bold #36C5F0",  # SKY-BLUE usage line
            "short-name": "bold #22C55E",  # GREEN short flags
            "long-name": "bold #00E6FF",  # CYAN long names
            "option-description": "#9CA3AF",  # Muted gray
        } | getattr(__import__("__main__"), "__styles__", {}))

        def text(fragment, style):
            return Text(fragment, styles[style] if self.colorful else "")

        table = Table.grid(padding=(0, 1))
        table.add_column(width=3)
        table.add_column(width=3)
        table.add_column()
        table.add_column()
        for short, long, description in self._columns():
            table.add_row(
                "",
                text(short, "short-name"),
                text(long, "long-name"),
                text(description, "option-description")
            )

        if self._banner:
            return Group(text(self._banner, "banner"), table)
        return table

    def help(self, *, stderr=False):
        """
        Print the rich help to stdout (or stderr).
        """
        Console(stderr=stderr).print(self)

    def __repr__(self):
        return f"parser({', '.join(map(functools.partial(operator.mod, '%s=%r'), self.__rich_repr__()))})"

    def __rich_repr__(self):
        yield "banner", self._banner
        yield "options", tuple(option.key for option in self._registry)
        yield "positionals", tuple(self._positionals)


def parse(items=Unset, configure=Unset, /, *args, **kwargs):
    """
    Build a parser, parse items, and return the parser.

    Parameters
    - items: Unset | str | Iterable[str] (see tokenize()).
    - configure: Unset | Callable[[Parser], object]
      Receives the new parser to register options on.
    - *args, **kwargs: forwarded to Parser(...).

    Raises
    - MissingCompulsoryArgumentError: an option requiring an argument has none.
    """
    if configure is Unset:
        parser = Parser(*args, **kwargs)
    else:
        parser = Parser.build(configure, *args, **kwargs)
    parser.parse(items)
    return parser


__all__ = (
    "Parser",
    "ParseResult",
    "isflaglike",
    "flagname",
    "tokenize",
    "parse",
)
