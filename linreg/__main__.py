from .train_regression import main


if __name__ == "__main__":
    main()
