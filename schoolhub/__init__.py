"""SchoolHub client package.

Keep package import lightweight; import heavy submodules explicitly where needed.
"""

__version__ = "1.0.0"
__all__ = [
	"api",
	"auth",
	"cli",
	"client",
	"config",
	"const",
	"errors",
	"exceptions",
	"http",
	"models",
	"notifications",
	"pages",
	"query",
	"router",
	"storage",
]
