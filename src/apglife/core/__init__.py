"""Grid storage, Life rules, random source and noise seeder."""
