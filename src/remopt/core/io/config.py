"""
Configuration object
====================

Layered configuration for the remopt client.

Each option resolves, in order of precedence, from a value set explicitly on the
object, an environment variable, a YAML file (global config or dotfile) and finally
the default declared with :meth:`Configuration.add_option`.

"""
import logging
import os
import pprint

import yaml

logger = logging.getLogger(__name__)


NOT_SET = object()


class ConfigurationError(Exception):
    """Error raised when a configuration value is requested but not set."""


def _curate(key):
    return key.replace("-", "_")


class Configuration:
    """Configuration object

    Examples
    --------
    >>> config = Configuration()
    >>> config.add_option('url', str, 'http://127.0.0.1:8000', 'REMOPT_API_URL')
    >>> config.url
    'http://127.0.0.1:8000'
    >>> config.load_yaml('~/.remopt.yaml')
    >>> config.url
    'https://from.the.dotfile'
    >>> os.environ['REMOPT_API_URL'] = 'https://from.env'
    >>> config.url
    'https://from.env'
    >>> config.url = 'https://set.here'
    >>> config.url
    'https://set.here'

    """

    SPECIAL_KEYS = ["_config", "_subconfigs", "_yaml", "_default", "_env_var"]

    def __init__(self):
        self._config = {}
        self._subconfigs = {}

    def load_yaml(self, path):
        """Load yaml file and set it as the yaml level of the configuration

        Parameters
        ----------
        path: str
            Path to the configuration file. ``~`` is expanded.

        Raises
        -------
        ConfigurationError
            If some option in the yaml file does not exist in the config

        """
        with open(os.path.expanduser(path), encoding="utf8") as f:
            cfg = yaml.safe_load(f)

        if cfg is None:
            return

        logger.debug("Loading configuration file %s", path)
        self._load_yaml_dict(cfg)

    def _load_yaml_dict(self, config):
        for key in self._config:
            if key not in config:
                continue
            value = config.pop(key)
            logger.debug(
                'Overwritting "%s" default %s with %s', key, self[key + "._default"], value
            )
            self[key + "._yaml"] = value

        for key, item in self._subconfigs.items():
            if key not in config:
                continue

            # pylint: disable=protected-access
            item._load_yaml_dict(config.pop(key))

        if config:
            # Make it fail on the first unknown key
            self[next(iter(config.keys()))]

    def __getattr__(self, key):
        """Get the value of the option

        Raises
        -------
        ConfigurationError
            If the option does not exist or has no value nor default.

        """
        if key == "config":
            raise AttributeError

        if key not in self._config and key not in self._subconfigs:
            raise ConfigurationError(
                f"Configuration does not have an attribute '{key}'."
            )
        if key in self._subconfigs:
            return self._subconfigs[key]

        config_setting = self._config[key]
        if "value" in config_setting:
            value = config_setting["value"]
        elif "env_var" in config_setting and config_setting["env_var"] in os.environ:
            value = os.environ[config_setting["env_var"]]
        elif "yaml" in config_setting:
            value = config_setting["yaml"]
        elif "default" in config_setting:
            value = config_setting["default"]
        else:
            raise ConfigurationError(
                f"Configuration not set and no default provided: {key}."
            )

        return config_setting["type"](value)

    def __setattr__(self, key, value):
        """Set option value or subconfiguration

        Raises
        ------
        TypeError
            If value is a configuration while an option is defined for that key,
            if the value has an invalid type for the option, or if no option exists
            for the key and the value is not a configuration object.

        """
        key = _curate(key)
        if key not in self.SPECIAL_KEYS and key in self._config:
            self._validate(key, value)
            self._config[key]["value"] = value

        elif key in ["_config", "_subconfigs"]:
            super().__setattr__(key, value)

        elif key in self._subconfigs:
            raise ValueError(f"Configuration already contains subconfiguration {key}")

        elif isinstance(value, Configuration):
            self._subconfigs[key] = value

        else:
            raise TypeError(
                f"Can only set {key} as a Configuration, not {type(value)}. "
                "Use add_option to set a new option."
            )

    def _validate(self, key, value):
        if isinstance(value, Configuration):
            raise TypeError(f"Cannot overwrite option {key} with a configuration")

        try:
            self._config[key]["type"](value)
        except ValueError as e:
            message = (
                f"Option {key} of type {self._config[key]['type']} "
                f"cannot be set to {value} with type {type(value)}"
            )
            raise TypeError(message) from e

    def __setitem__(self, key, value):
        """Set option value using a dotted key, ex: ``config['api.url'] = ...``"""
        keys = list(map(_curate, key.split(".")))

        if len(keys) == 2 and keys[-1] in self.SPECIAL_KEYS:
            key, field = keys
            self._validate(key, value)
            self._config[key][field.lstrip("_")] = value

        elif len(keys) == 1:
            setattr(self, keys[0], value)

        else:
            subconfig = getattr(self, keys[0])
            subconfig[".".join(keys[1:])] = value

    def __getitem__(self, key):
        """Get option value using a dotted key, ex: ``config['api.url']``"""
        keys = list(map(_curate, key.split(".")))

        if len(keys) == 2 and keys[1] in self.SPECIAL_KEYS:
            key_config = self._config.get(keys[0], None)
            if key_config is None:
                raise ConfigurationError(
                    f"Configuration does not have an attribute '{keys[0]}'."
                )
            return key_config.get(keys[1][1:], None)

        if len(keys) > 1:
            return getattr(self, keys[0])[".".join(keys[1:])]

        return getattr(self, keys[0])

    # pylint: disable=redefined-builtin
    def add_option(self, key, option_type, default=NOT_SET, env_var=None, help=None):
        """Add a configuration setting.

        Parameters
        ----------
        key : str
            The name of the configuration setting. Must be a valid attribute name.
        option_type : function
            A function such as ``float``, ``int`` or ``str`` which takes the
            configuration value and returns an object of the correct type. Values
            read from environment variables are always strings.
        default : object, optional
            The default configuration to return if not set. By default none
            is set and an error is raised instead.
        env_var : str, optional
            The environment variable name that holds this configuration value.
        help : str, optional
            Documentation for the option.

        """
        key = _curate(key)
        if key in self._config or key in self._subconfigs:
            raise ValueError(f"Configuration already contains {key}")
        self._config[key] = {"type": option_type}
        if env_var is not None:
            self._config[key]["env_var"] = env_var
        if default is not NOT_SET:
            self._config[key]["default"] = default

        if help is not None:
            self._config[key]["help"] = help

    def to_dict(self):
        """Return a dictionary representation of the configuration"""
        config = {}

        for key in self._config:
            config[key] = self[key]

        for key in self._subconfigs:
            config[key] = self[key].to_dict()

        return config

    def __repr__(self) -> str:
        return pprint.pformat(self.to_dict())
