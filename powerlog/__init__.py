"""powerlog: device power telemetry schema, migration and hourly rollup."""
