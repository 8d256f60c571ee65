# *****************************************************************
# IonControl:  Copyright 2016 Sandia Corporation
# This Software is released under the GPL license detailed
# in the file "license.txt" in the top-level IonControl directory
# *****************************************************************


class GnuplotError(Exception):
    pass


class SpawnFailure(GnuplotError):
    """gnuplot executable could not be launched"""
    pass


class StreamClosed(GnuplotError):
    pass


class PipeError(GnuplotError):
    """writing to or flushing the gnuplot pipe failed"""
    pass


class FramingMismatch(GnuplotError):
    """number of values does not match the declared dimensions"""
    pass


class InsufficientData(FramingMismatch):
    pass


class ExcessData(FramingMismatch):
    pass


class EncodingError(GnuplotError):
    pass
