import time
import numpy as np


def franke(x, y):
    """
    Franke's bivariate test function
    """
    term1 = 0.75 * np.exp(-((9 * x - 2) ** 2) / 4 - ((9 * y - 2) ** 2) / 4)
    term2 = 0.75 * np.exp(-((9 * x + 1) ** 2) / 49 - (9 * y + 1) / 10)
    term3 = 0.5 * np.exp(-((9 * x - 7) ** 2) / 4 - ((9 * y - 3) ** 2) / 4)
    term4 = -0.2 * np.exp(-((9 * x - 4) ** 2) - (9 * y - 7) ** 2)
    return term1 + term2 + term3 + term4


def buildSamples(num_samples, seed=0):
    """
    Scatter samples of Franke's function over the unit square
    """
    rng = np.random.default_rng(seed)
    pts = rng.uniform(0, 1, size=(num_samples, 2))
    return [(p, franke(p[0], p[1])) for p in pts]


if __name__ == "__main__":

    import logging

    import jax
    import jax.numpy as jnp
    import rbf_network

    logging.basicConfig(level=logging.INFO)
    logging.getLogger("rbf_network").setLevel(logging.DEBUG)
    jax.config.update('jax_default_device', jax.devices('cpu')[0])  # Change to 'gpu' or 'tpu' for accelerators

    samples = buildSamples(200)

    for kernel_type in rbf_network.KernelType:
        for normalized in (False, True):
            start = time.time()
            config = rbf_network.TrainConfig(kernel_type=kernel_type, normalized=normalized)
            result = rbf_network.train(samples, config)
            state = result.state
            train_time = time.time() - start

            # evaluate on a test grid
            x = np.linspace(0, 1, num=41)
            X, Y = np.meshgrid(x, x, indexing="xy")
            points = jnp.array(np.column_stack([X.ravel(), Y.ravel()]))
            pred = rbf_network.value_batch(state, points)
            err = np.max(np.abs(np.asarray(pred) - franke(X.ravel(), Y.ravel())))

            print(
                "{:<22s} normalized={!s:<5s} rcond={:.3e} max error={:.3e} ({:3.3f} sec)".format(
                    kernel_type.description, normalized, result.diagnostics.rcond, err, train_time
                )
            )
