"""Pure building blocks shared by the run service and its front ends."""
