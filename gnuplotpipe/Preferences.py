# *****************************************************************
# IonControl:  Copyright 2016 Sandia Corporation
# This Software is released under the GPL license detailed
# in the file "license.txt" in the top-level IonControl directory
# *****************************************************************
import logging
import os.path

import yaml

from .Encodings import encodingValid


class GnuplotPreferences(object):
    fieldTypes = {'gnuplotExecutable': str,
                  'persistArgument': str,
                  'flushPadding': int,
                  'startupDelay': float,
                  'byteorder': str}

    def __init__(self):
        self.gnuplotExecutable = 'gnuplot'
        self.persistArgument = '-p'
        self.flushPadding = 250         # comment lines written by flush, must exceed gnuplot's input buffer
        self.startupDelay = 0.0         # seconds to wait after spawning gnuplot
        self.byteorder = 'native'

    def __setstate__(self, state):
        self.__dict__ = state
        self.__dict__.setdefault('gnuplotExecutable', 'gnuplot')
        self.__dict__.setdefault('persistArgument', '-p')
        self.__dict__.setdefault('flushPadding', 250)
        self.__dict__.setdefault('startupDelay', 0.0)
        self.__dict__.setdefault('byteorder', 'native')

    def __eq__(self, other):
        return isinstance(other, GnuplotPreferences) and self.__dict__ == other.__dict__

    def __repr__(self):
        return "GnuplotPreferences({0})".format(self.__dict__)

    @classmethod
    def convert(cls, key, value):
        """value converted to the type of field key, ValueError if it is not acceptable"""
        fieldType = cls.fieldTypes[key]
        if isinstance(value, bool) and fieldType is not str:
            # YAML reads yes/no/true/false as bool, int() would make that 1 or 0
            raise ValueError("boolean for numeric field")
        value = fieldType(value)
        if key == 'byteorder' and not encodingValid(value):
            raise ValueError("unknown byte order")
        if key == 'flushPadding' and value <= 0:
            raise ValueError("flush padding must be positive")
        if key == 'startupDelay' and value < 0:
            raise ValueError("startup delay must not be negative")
        return value

    def update(self, values):
        """set fields from a mapping, unknown or invalid entries are logged and ignored"""
        logger = logging.getLogger(__name__)
        for key, value in values.items():
            if key not in self.fieldTypes:
                logger.warning("Unknown gnuplot preference '{0}' ignored".format(key))
                continue
            try:
                setattr(self, key, self.convert(key, value))
            except (TypeError, ValueError) as e:
                logger.warning("Invalid value {0!r} for gnuplot preference '{1}' ignored: {2}".format(value, key, e))


def loadPreferences(filename):
    """Read preferences from a YAML file. Missing or malformed files leave the defaults."""
    logger = logging.getLogger(__name__)
    preferences = GnuplotPreferences()
    if os.path.exists(filename):
        with open(filename, 'r') as f:
            try:
                yamldata = yaml.safe_load(f)
            except yaml.YAMLError:
                logger.warning('YAML formatting error: unable to read gnuplot preferences file {0}'.format(filename))
                return preferences
        if isinstance(yamldata, dict):
            preferences.update(yamldata)
            logger.info('Gnuplot preferences file {0} loaded'.format(filename))
        elif yamldata is not None:
            logger.warning('Gnuplot preferences file {0} does not contain a mapping'.format(filename))
    else:
        logger.debug('Gnuplot preferences file {0} not found, using defaults'.format(filename))
    return preferences


def savePreferences(preferences, filename):
    with open(filename, 'w') as f:
        yaml.dump(dict(preferences.__dict__), f, default_flow_style=False)
    logging.getLogger(__name__).info('Gnuplot preferences saved to {0}'.format(filename))
