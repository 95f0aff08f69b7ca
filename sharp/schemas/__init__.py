"""
SharpSuite Schemas.

Pydantic models for request validation.
"""

from sharp.schemas.auth import *
from sharp.schemas.courts import *
from sharp.schemas.fitness import *
from sharp.schemas.focus import *
from sharp.schemas.reading import *
from sharp.schemas.usage import *
