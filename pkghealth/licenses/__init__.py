"""License data and SPDX handling."""
