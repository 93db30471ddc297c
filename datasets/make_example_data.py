import pandas as pd
from sklearn.datasets import make_classification

# Three-class synthetic table in the layout the runner expects:
# identifier, class label, then features (one of them categorical)
X, y = make_classification(n_samples=150, n_features=6, n_informative=4, n_classes=3,
                           n_clusters_per_class=1, random_state=42)
df = pd.DataFrame(X, columns=[f'f{i}' for i in range(X.shape[1])])
df['site'] = ['north' if v > 0 else 'south' for v in X[:, 0]]
df.insert(0, 'Classification', [f'class_{c}' for c in y])
df.insert(0, 'ID', [f'rec{i:04d}' for i in range(len(df))])

df.to_csv('datasets/example_train.csv', index=False)
df.drop(columns=['Classification']).assign(Classification='NA')[df.columns].to_csv(
    'datasets/example_predict.csv', index=False)

print(f"Wrote {len(df)} rows, classes: {sorted(df['Classification'].unique())}")
