from rigidframe import TransformMatrix, EulerOrder
import timeit


if __name__ == "__main__":
    N = 1_000_000

    t = TransformMatrix.from_euler(10, 20, 30).set_position(1, 2, 3)
    other = TransformMatrix.from_euler(-5, 40, 15, EulerOrder.ZYX)

    # warmup, compiles the kernels
    t.multiplied(other)
    t.to_euler()
    t.to_quaternion()
    t.rotated(1, 2, 3)

    print("creation: ", timeit.timeit(lambda: TransformMatrix(), number=N))
    print("from euler: ", timeit.timeit(
        lambda: TransformMatrix.from_euler(10, 20, 30), number=N))
    print("from quaternion: ", timeit.timeit(
        lambda: TransformMatrix.from_quaternion(0.0, 0.0, 0.7071, 0.7071), number=N))

    print("multiplied: ", timeit.timeit(lambda: t.multiplied(other), number=N))
    print("rotated: ", timeit.timeit(lambda: t.rotated(1, 2, 3), number=N))

    for order in EulerOrder:
        print(f"to euler {order.name}: ", timeit.timeit(
            lambda: t.to_euler(order), number=N))
    print("to quaternion: ", timeit.timeit(lambda: t.to_quaternion(), number=N))
