"""Value types shared by the probe components."""
