# *****************************************************************
# IonControl:  Copyright 2016 Sandia Corporation
# This Software is released under the GPL license detailed
# in the file "license.txt" in the top-level IonControl directory
# *****************************************************************
import logging
import sys


class LevelThresholdFilter(logging.Filter):
    def __init__(self, passlevel, reject):
        logging.Filter.__init__(self)
        self.passlevel = passlevel
        self.reject = reject

    def filter(self, record):
        if self.reject:
            return (record.levelno >= self.passlevel)
        else:
            return (record.levelno < self.passlevel)


formatter = logging.Formatter('%(levelname)s %(name)s(%(filename)s:%(lineno)d %(funcName)s) %(message)s')
fileformatter = logging.Formatter('%(asctime)s %(levelname)s %(name)s(%(filename)s:%(lineno)d %(funcName)s) %(message)s')

stdoutHandler = None
stderrHandler = None
errorHandler = None


def setupLogging(level=logging.INFO, loggerName='gnuplotpipe', stdout=None, stderr=None):
    """Send records below WARNING to stdout and the rest to stderr. Calling it again replaces the handlers."""
    global stdoutHandler, stderrHandler
    logger = logging.getLogger(loggerName)
    logger.setLevel(level)
    for handler in (stdoutHandler, stderrHandler):
        if handler is not None:
            logger.removeHandler(handler)

    stdoutHandler = logging.StreamHandler(stdout if stdout is not None else sys.stdout)
    stdoutHandler.setFormatter(formatter)
    stdoutHandler.addFilter(LevelThresholdFilter(logging.WARNING, False))

    stderrHandler = logging.StreamHandler(stderr if stderr is not None else sys.stderr)
    stderrHandler.setFormatter(formatter)
    stderrHandler.addFilter(LevelThresholdFilter(logging.WARNING, True))

    logger.addHandler(stdoutHandler)
    logger.addHandler(stderrHandler)
    return logger


def setErrorFilename(filename, loggerName='gnuplotpipe'):
    global errorHandler
    logger = logging.getLogger(loggerName)
    if errorHandler is not None:
        logger.removeHandler(errorHandler)
        errorHandler.close()
    errorHandler = logging.FileHandler(filename)
    errorHandler.setFormatter(fileformatter)
    errorHandler.addFilter(LevelThresholdFilter(logging.ERROR, True))
    logger.addHandler(errorHandler)
    return errorHandler
