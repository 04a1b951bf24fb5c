from __future__ import annotations

from collections import ChainMap
from types import ModuleType
from typing import Any, Callable, Iterable, Iterator, Optional
from os import PathLike

from .errors import ConfigError
from .parsers import parse_bool
from .reader import DEFAULT_BUFSIZE


class Enum:
    """Variants enumeration.

    Used to define variants for the option.
    """

    def __init__(self, *variants: str | int | bool | None):
        self.variants = variants

    def match(self, value: Any) -> bool:
        return value in self.variants

    def __repr__(self):
        variants = ', '.join(str(v) for v in self.variants)
        return f"Enum({variants})"

    def __str__(self):
        variants = ' | '.join(str(v) for v in self.variants)
        return f"({variants})"


class Option:
    """Config option.

    Used to define the schema. Immutable.

    Parameters:
        type: Option's type.
        required: If the option is required. If the option is required and
                  not assigned, an error will be raised.
        default: Option's default value.
        check: Optional predicate the value must satisfy.
    """

    default: Any
    required: bool
    type: type | Enum
    check: Optional[Callable[[Any], bool]]

    def __init__(self, type, default=None, required=False, check=None):
        super().__setattr__('default', default)
        super().__setattr__('required', required)
        super().__setattr__('type', type)
        super().__setattr__('check', check)

    def __setattr__(self, name: str, value: Any):
        raise AttributeError

    def __delattr__(self, name: str):
        raise AttributeError

    def __repr__(self):
        if type(self.type) is type:
            tp = self.type.__name__
        else:
            tp = repr(self.type)
        attrs = ('default', 'required')
        kwargs = ', '.join(f"{attr}={getattr(self, attr)}" for attr in attrs)
        return f"Option({tp}, {kwargs})"

    def __str__(self):
        return repr(self)


def _convert_bool(value: str) -> bool:
    return parse_bool(value.lower())


class Config:
    def __init__(self, schema: dict[str, Option], strict=True):
        """Initialize Config instance.

        Args:
            schema: Schema mapping.
            strict: If true, adding options that are not in schema
                    is not allowed.
        """
        self._config = ChainMap(schema)
        self._types: dict[type, Callable[[str], Any]] = {}

        register = self.register_type
        register(int, int)
        register(float, float)
        register(bool, _convert_bool)
        register(str, str)

        self.strict = strict

    @property
    def schema(self) -> dict[str, Option]:
        """Return the schema mapping."""
        return self._config.maps[-1]

    def register_type(self, type_: type, convert_fn: Callable[[str], Any]):
        """Add the new type handler.

        The handler converts the option value from its string form, as it
        is given in `name=value` definitions.
        """
        self._types[type_] = convert_fn

    def override(self, options: dict[str, Any]):
        """Assign options to config.

        Each call to `override` adds new option values on the top
        of old values.

        Raises:
            ConfigError
        """
        self._try_insert_map(self._override, options, False)

    def parse(self, it: Iterable[str]):
        """Parse and override options.

        Option string has the format `<option_name>=<value>`.

        Raises:
            ConfigError
        """
        options: dict[str, str] = {}
        for s in it:
            name, sep, value = s.partition('=')
            name = name.strip()
            if not sep or not name:
                raise ConfigError(f"expected <name>=<value>, got {s!r}")
            options[name] = value.strip()

        self._try_insert_map(self._override, options, True)

    def validate(self) -> None:
        """Check that all required options are assigned.

        Raises:
            ConfigError.
        """
        required_options: list[str] = []
        for name, value in self._config.items():
            if isinstance(value, Option) and value.required:
                required_options.append(name)

        if required_options:
            opts = ', '.join(repr(n) for n in required_options)
            raise ConfigError(f"required options: {opts}")

    def _try_insert_map(self, fn: Callable, *args: Any):
        self._config.maps.insert(0, {})
        try:
            fn(*args)
        except Exception:
            self._config.maps.pop(0)
            raise

    def _override(self, options: dict[str, Any], convert: bool):
        schema = self.schema

        for name, value in options.items():
            if name not in schema:
                if self.strict:
                    raise ConfigError(f"unknown option {name!r}")
                self._config[name] = value
                continue

            option = schema[name]
            if convert and isinstance(value, str):
                value = self._convert(name, value, option)

            msg = self._invalid_value(name, value, option)
            if msg:
                raise ConfigError(msg)

            self._config[name] = value

    def _convert(self, name: str, value: str, option: Option) -> Any:
        tp = option.type
        if isinstance(tp, Enum):
            for variant in tp.variants:
                if str(variant) == value:
                    return variant
            return value

        convert_fn = self._types.get(tp)
        if convert_fn is None:
            raise ConfigError(f"option {name!r}: no converter for {tp}")
        try:
            return convert_fn(value)
        except (ValueError, TypeError) as e:
            raise ConfigError(f"option {name!r}: {e}") from e

    def _invalid_value(self, name, value, option) -> Optional[str]:
        tp = option.type

        if isinstance(tp, Enum):
            if not tp.match(value):
                return (f"option {name!r} must be one of the following: "
                        f"{tp}, got {value!r}")
        # bool is a subclass of int, but True is not a buffer size
        elif (not isinstance(value, tp) or
              tp is not bool and isinstance(value, bool)):
            return (f"option {name!r} must be of type {tp.__name__}, "
                    f"got {type(value).__name__}: {value!r}")

        if option.check is not None and not option.check(value):
            return f"invalid value of option {name!r}: {value!r}"

        return None

    def items(self) -> Iterator[tuple[str, Any]]:
        for name, value in self._config.items():
            if isinstance(value, Option):
                value = value.default
            yield name, value

    def clear(self):
        """Remove assigned options, preserving the schema."""
        self._config.maps = self._config.maps[-1:]

    @property
    def layers(self) -> int:
        """Total number of override layers."""
        return len(self._config.maps) - 1

    def pop_layer(self) -> Optional[dict[str, Any]]:
        """Remove the latest override layer, if exists."""
        if len(self._config.maps) == 1:
            return None
        return self._config.maps.pop(0)

    def __getattr__(self, name: str) -> Any:
        if name.startswith('_'):
            raise AttributeError(name)
        if name in self._config:
            value = self._config[name]
            if isinstance(value, Option):
                return value.default
            return value

        raise AttributeError(f"no such config value: {name!r}")

    def __getitem__(self, name: str) -> Any:
        return getattr(self, name)

    def __contains__(self, name: str) -> bool:
        return name in self._config

    def __iter__(self) -> Iterator[str]:
        yield from self._config

    def __repr__(self):
        lines = ["Config({"]
        for name, val in self.schema.items():
            lines.append(f"  {name!r}: {val!r},")
        lines.append("})")
        return '\n'.join(lines)


TYPES: dict[str, type] = {
    "str": str,
    "int": int,
    "float": float,
    "bool": bool,
}

READER_OPTIONS: dict[str, Option] = {
    "bufsize": Option(int, default=DEFAULT_BUFSIZE, check=lambda n: n > 0),
    "type": Option(Enum(*TYPES), default="str"),
    "skip": Option(int, default=0, check=lambda n: n >= 0),
}


def reader_config() -> Config:
    return Config(READER_OPTIONS)


def read_file(schema: dict[str, Option],
              filename: str | PathLike[str]) -> Config:
    """Create Config object from configuration file.

    The file is a Python module; its public top-level names are the
    option values.
    """
    namespace = eval_config_file(filename)

    options = {attr: val for attr, val in namespace.items()
               if not (attr.startswith('_') or isinstance(val, ModuleType))}

    cfg = Config(schema)
    cfg.override(options)
    cfg.validate()

    return cfg


def eval_config_file(filename: str | PathLike[str]) -> dict[str, Any]:
    namespace: dict[str, Any] = {}

    try:
        with open(filename, 'rb') as fin:
            code = compile(fin.read(), filename, 'exec')
            exec(code, namespace)
    except OSError as e:
        raise ConfigError(f'cannot read the config file: {e}') from e
    except SyntaxError as e:
        raise ConfigError(f'syntax error in the config file: {e}') from e
    except SystemExit as e:
        raise ConfigError('the configuration file called sys.exit()') from e
    except ConfigError:
        raise
    except Exception as e:
        raise ConfigError(f'an exception in the config file: {e}') from e

    return namespace
