"""Profile QC: data handling, standard levels, checks and orchestration."""
