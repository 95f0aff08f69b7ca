"""
SharpSuite Pipelines.

Business logic orchestration functions.
"""

from sharp.pipelines.auth import *
from sharp.pipelines.courts import *
from sharp.pipelines.fitness import *
from sharp.pipelines.focus import *
from sharp.pipelines.reading import *
from sharp.pipelines.usage import *
from sharp.pipelines.ai import *
