"""Core modules for the payments analytics dashboard."""

from . import config, features, ingest, insights, logging_setup, models, stats, summarize, synth, utils, viz

__all__ = [
	"config",
	"features",
	"ingest",
	"insights",
	"logging_setup",
	"models",
	"stats",
	"summarize",
	"synth",
	"utils",
	"viz",
]
