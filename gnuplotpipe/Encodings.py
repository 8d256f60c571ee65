# *****************************************************************
# IonControl:  Copyright 2016 Sandia Corporation
# This Software is released under the GPL license detailed
# in the file "license.txt" in the top-level IonControl directory
# *****************************************************************
import numpy

from .Errors import EncodingError


class FloatEncoding:
    """Single precision float layout of the binary data gnuplot reads after '-' binary.

    byteorder is one of 'native', 'little' or 'big'. The endian parameter written into
    the plot directive is derived from the same setting, so directive and payload cannot
    disagree. Native order leaves the parameter out, gnuplot then assumes native as well.
    """
    dtypes = {'native': '=f4', 'little': '<f4', 'big': '>f4'}

    def __init__(self, byteorder='native'):
        if byteorder not in self.dtypes:
            raise EncodingError("Undefined byte order '{0}'".format(byteorder))
        self.byteorder = byteorder
        self.dtype = numpy.dtype(self.dtypes[byteorder])

    @property
    def endianParameter(self):
        return '' if self.byteorder == 'native' else 'endian={0}'.format(self.byteorder)

    @property
    def itemsize(self):
        return self.dtype.itemsize

    def array(self, values):
        return numpy.asarray(values, dtype=self.dtype)

    def encode(self, values):
        return self.array(values).tobytes()

    def encodeFloat(self, value):
        return numpy.array([value], dtype=self.dtype).tobytes()

    def decode(self, data):
        return numpy.frombuffer(data, dtype=self.dtype)

    def __eq__(self, other):
        return isinstance(other, FloatEncoding) and self.byteorder == other.byteorder

    def __hash__(self):
        return hash(self.byteorder)

    def __repr__(self):
        return "FloatEncoding('{0}')".format(self.byteorder)


EncodingDict = {name: FloatEncoding(name) for name in FloatEncoding.dtypes}


def encodingValid(byteorder):
    return byteorder in EncodingDict


def encode(values, byteorder='native'):
    try:
        return EncodingDict[byteorder].encode(values)
    except KeyError:
        raise EncodingError("Undefined byte order '{0}'".format(byteorder))


def decode(data, byteorder='native'):
    try:
        return EncodingDict[byteorder].decode(data)
    except KeyError:
        raise EncodingError("Undefined byte order '{0}'".format(byteorder))
