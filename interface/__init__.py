"""Front-ends for the engine: REST, terminal and UCI."""
