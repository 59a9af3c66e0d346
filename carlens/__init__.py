"""CarLens: car photo gallery with AI-generated vehicle details."""
