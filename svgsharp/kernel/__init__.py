"""Kernel services shared by the interpreter: logging channels and ini settings."""

from .channel import *
from .settings import *
