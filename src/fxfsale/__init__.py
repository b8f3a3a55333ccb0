"""FXF token sale core: price conversion and vesting schedule computation."""
