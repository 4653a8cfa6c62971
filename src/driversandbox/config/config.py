import logging
import os
import platform

from configobj import ConfigObj, ConfigObjError, Section
from validate import Validator

from driversandbox.results import backup, table, variable

logger = logging.getLogger(__name__)

# The default extension for configuration files
config_extension = '.cfg'

# The configuration shipped with the package
package_directory = os.path.dirname(__file__)

sandbox_config_name = 'sandbox'


def config_flavor(name, flavor=None):
    configname = name if not flavor else name + '.' + flavor
    return configname


def config_filename(name, directory):
    """
    Determines the location of a config file in the given directory.
    """
    return os.path.join(directory, name + config_extension)


def load_config_file_base(file, must_exist=True):
    """
    Loads a configuration file
    :param file:        The configuration file to load
    :param must_exist:  when True, the file must exist or an exception is thrown.
    :return: The ConfigObj instance for the file.
    """
    try:
        if must_exist or os.path.exists(file):
            return ConfigObj(file, interpolation='Template', file_error=must_exist)
        return ConfigObj()
    except ConfigObjError as e:
        raise type(e)(str(e) + ' at ' + file)


def config_flavor_file(name, directory, subpart=None) -> ConfigObj:
    """
    Loads a specialization of a config file. The configuration file is expected to be named
    after the base, followed by a period and then the specialization, if the specialization is given,
    otherwise just the base name. A missing file gives an empty configuration.
    :param name:    The name of the base configuration
    :param subpart: The name of the specialization.
    :return: The ConfigObj for the configuration file.
    """
    configname = config_flavor(name, subpart)
    file = config_filename(configname, directory)
    return load_config_file_base(file, False)


def map_os_name(name):
    """
    >>> map_os_name('Windows')
    'windows'
    >>> map_os_name("Darwin")
    'osx'
    """
    name = name.lower()
    if name == 'darwin':
        name = 'osx'
    return name


def os_name():
    return map_os_name(platform.system())


def user_config_file(name):
    return os.path.expanduser('~/' + name + config_extension)


def load_config(name, directory, schema_directory=None):
    """
        Loads all the configuration files that relate to the given name.
        Configurations are merged in this order, later ones taking precedence:
        - the default specialization
        - the platform specialization
        - the user override
        - the base configuration
        The merged configuration is validated against the "schema" specialization, which
        also converts the values to their declared types and fills in defaults.
    :param directory: the location of the configuration files
    :param schema_directory: the location of the schema, when it differs from directory
    :return: the validated ConfigObj
    """
    schema = config_filename(config_flavor(name, 'schema'), schema_directory or directory)
    config = ConfigObj(configspec=schema) if os.path.exists(schema) else ConfigObj()
    config.merge(config_flavor_file(name, directory, 'default'))
    config.merge(config_flavor_file(name, directory, os_name()))
    config.merge(load_config_file_base(user_config_file(name), must_exist=False))
    config.merge(config_flavor_file(name, directory))

    if config.configspec is not None:
        result = config.validate(Validator(), preserve_errors=True)
        if result is not True:
            raise ConfigObjError("the config file %s failed validation %s" % (name, result))
    return config


def fetch_conf_path(conf: Section, path):
    """
    Retrieves the named configuration section
    :param conf:        The root configuration
    :param path:        An iterable that lists the names of the config to resolve
    :return: The configuration object identified by the path, or None if there is no such section
    """
    for p in path:    # lookup specific section
        conf = conf.get(p, None)
        if conf is None:
            return None
    return conf


def apply_conf_path(conf: Section, name_parts, target):
    """
    Applies a configuration path to a given target object
    :param conf:        The root configuration object
    :param name_parts:  The path of the configuration to apply
    :param target:      The target object that receives the configured values
    """
    conf = fetch_conf_path(conf, name_parts)
    if conf:
        apply_conf(conf, target)


def apply_conf(conf: Section, target):
    """
    Applies the scalar values in a configuration section to a target object, setting any
    attributes the target already has with the same name. Unknown names are ignored.
    """
    for k, v in conf.items():
        if isinstance(v, Section):
            continue
        if hasattr(target, k):
            setattr(target, k, v)
        else:
            logger.debug("ignoring unknown setting %s", k)


class VariableSettings:
    def __init__(self):
        self.max_uid_len = variable.MAX_UID_LEN
        self.max_unit_len = variable.MAX_UNIT_LEN


class TableSettings:
    def __init__(self):
        self.max_label_len = table.MAX_TABLE_LABEL_LEN
        self.max_column_header_len = table.MAX_COLUMN_HEADER_LEN
        self.max_column_unit_len = table.MAX_COLUMN_UNIT_LEN
        self.max_record_id_len = table.MAX_RECORD_ID_LEN


class BackupSettings:
    def __init__(self):
        self.max_size = backup.MAX_BACKUP_SIZE
        self.default_label = backup.DEFAULT_BACKUP_LABEL


class SandboxSettings:
    """
    The limits the host applies to driver results. The defaults match the host; load_settings()
    overrides them from configuration files.
    """

    def __init__(self):
        self.abort_on_failure = False
        self.variable = VariableSettings()
        self.table = TableSettings()
        self.backup = BackupSettings()


def load_settings(directory=None, name=sandbox_config_name) -> SandboxSettings:
    """
    Loads the sandbox settings.
    :param directory: the directory holding the configuration files. Defaults to the configuration
        shipped with the package. The package schema is used when the directory has none.
    :param name: the base name of the configuration files
    """
    directory = directory or package_directory
    schema_directory = directory \
        if os.path.exists(config_filename(config_flavor(name, 'schema'), directory)) else package_directory
    conf = load_config(name, directory, schema_directory)
    settings = SandboxSettings()
    apply_conf_path(conf, ['sandbox'], settings)
    for section in ('variable', 'table', 'backup'):
        apply_conf_path(conf, [section], getattr(settings, section))
    logger.debug("loaded %s settings from %s", name, directory)
    return settings
