"""Chart aggregations and AI chart insights for the budgeting app."""

from . import aggregations, config, insight, models, synth, utils, viz

__all__ = [
	"aggregations",
	"config",
	"insight",
	"models",
	"synth",
	"utils",
	"viz",
]
