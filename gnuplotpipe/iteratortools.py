# *****************************************************************
# IonControl:  Copyright 2016 Sandia Corporation
# This Software is released under the GPL license detailed
# in the file "license.txt" in the top-level IonControl directory
# *****************************************************************
from itertools import product

import numpy


class coordinateGrid:
    """(x, y) index pairs with y varying fastest, x in [0, width), y in [0, height).

    Every iteration starts from (0, 0) again, so the same object can feed several datasets.
    """
    def __init__(self, width, height):
        self.width = width
        self.height = height

    def __iter__(self):
        return product(range(self.width), range(self.height))

    def __len__(self):
        return self.width * self.height

    def __repr__(self):
        return "coordinateGrid({0}, {1})".format(self.width, self.height)


def coordinateRange(n):
    "lazy sequence 0..n-1"
    return range(n)


def isRecord(item):
    return isinstance(item, (tuple, list, numpy.ndarray)) and not isinstance(item, str)


def flattenRecords(values):
    """Flatten one level of nesting: numbers are yielded as they are, rows contribute their elements"""
    for item in values:
        if isRecord(item):
            for sub in item:
                yield sub
        else:
            yield item


def first(iterable, default=None):
    for item in iterable:
        return item
    return default
