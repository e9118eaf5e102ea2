# blobcount/__init__.py

# Grid & I/O
from .grid import Grid, FOREGROUND, BACKGROUND
from .io_save_load import read_pgm, write_pgm, save_json, GridFormatError

# Stages
from .binarise import threshold, sauvola_threshold, binarise
from .watershed import propagate, marker_map, commit_markers
from .topology import label_components, count_components

# Pipeline
from .config import PipelineConfig
from .pipeline import (
    run_pipeline,
    count_file,
    count_batch,
    PipelineResult,
)

__version__ = "0.1.0"
