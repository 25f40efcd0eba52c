"""automodel-cli: generate Sequelize model descriptors from a live database schema."""

__version__ = "0.1.0"
