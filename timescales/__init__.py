"""TIMESCALES __init__ file

Code written by: Luc IJspeert
"""

from . import main_functions
from .main_functions import *
from . import grid_functions as gf
from . import timeseries_functions as tsf
from . import utility as ut
from . import visualisation as vis
from .exceptions import *
