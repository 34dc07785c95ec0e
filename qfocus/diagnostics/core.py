"""Norm diagnostics for batched register tensors."""

from __future__ import annotations

import torch


def state_norm(state: torch.Tensor) -> torch.Tensor:
    """
    Compute the L2 norm of every batch member of a register tensor.

    Parameters
    ----------
    state:
        Complex tensor in register layout ``(active_dim, remaining_dim, batch)``.

    Returns
    -------
    torch.Tensor
        Real tensor of shape ``(batch,)``.

    Raises
    ------
    ValueError
        If ``state`` is not three-dimensional.
    """
    if state.dim() != 3:
        raise ValueError(
            f"state_norm expects shape (active_dim, remaining_dim, batch), got {tuple(state.shape)}"
        )
    norm_sq = (state.conj() * state).real.sum(dim=(0, 1))
    return torch.sqrt(norm_sq)


def assert_normalized(state: torch.Tensor, atol: float = 1e-5) -> None:
    """
    Assert that every batch member has norm ~1 within ``atol``.

    Raises
    ------
    ValueError
        If a norm is non-finite or further than ``atol`` from 1.
    """
    norms = state_norm(state)
    if not torch.all(torch.isfinite(norms)):
        raise ValueError("State norm contains non-finite values.")

    if not torch.allclose(norms, torch.ones_like(norms), atol=atol, rtol=0.0):
        raise ValueError(
            f"State is not normalized within tolerance {atol}. "
            f"Norms found: {norms.detach().cpu().tolist()}"
        )
