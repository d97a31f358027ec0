import marimo

__generated_with = "0.17.6"
app = marimo.App(width="full")


@app.cell
def _():
    import marimo as mo
    import numpy as np

    from colorquant import QuantizeConfig, quantize_image
    from colorquant.image_io import load_image
    from colorquant.pipeline import palette_summary
    from colorquant.viz import plot_quantization
    return (
        QuantizeConfig,
        load_image,
        mo,
        np,
        palette_summary,
        plot_quantization,
        quantize_image,
    )


@app.cell
def _(mo):
    mo.md("""
    # Color Quantization with K-Means

    Each pixel color is a point in RGB space. K-means groups those points into
    K clusters and every pixel is repainted with the mean color of its cluster,
    leaving an image with exactly K colors.

    Set an image path below, or leave it empty to use a synthetic gradient.
    """)
    return


@app.cell
def _(mo):
    image_path = mo.ui.text(label="Image path", value="")
    k_slider = mo.ui.slider(2, 32, value=8, label="K (colors)")
    seed = mo.ui.number(0, 10_000, value=0, label="Seed")
    mo.hstack([image_path, k_slider, seed])
    return image_path, k_slider, seed


@app.cell
def _(image_path, load_image, np):
    if image_path.value:
        image = load_image(image_path.value)
    else:
        # Synthetic 96x128 gradient with a blue square
        yy, xx = np.mgrid[0:96, 0:128]
        image = np.stack([xx * 2, yy * 2, np.full_like(xx, 60)], axis=-1).astype(np.uint8)
        image[30:60, 40:80] = (20, 40, 220)
    return (image,)


@app.cell
def _(QuantizeConfig, image, k_slider, plot_quantization, quantize_image, seed):
    config = QuantizeConfig(n_clusters=k_slider.value, random_state=int(seed.value))
    quantized, result = quantize_image(image, config)

    fig_quantized = plot_quantization(image, quantized, result)
    fig_quantized
    return (result,)


@app.cell
def _(mo, palette_summary, result):
    lines = [
        "## Palette",
        "",
        f"Iterations: **{result.n_iter}**, converged: **{result.converged}**, "
        f"empty cluster passes: **{result.empty_cluster_count}**",
        "",
        "| Cluster | RGB | Pixels | Share |",
        "|---|---|---|---|",
    ]
    lines += [
        f"| {p['index']} | {tuple(p['color'])} | {p['count']} | {p['fraction'] * 100:.1f}% |"
        for p in palette_summary(result)
    ]
    mo.md("\n".join(lines))
    return


if __name__ == "__main__":
    app.run()
